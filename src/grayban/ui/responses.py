"""
Reply texts and embeds sent back to chat.

Every user-facing string lives here so the command dispatcher and the
moderation pipeline only decide *which* reply to send.
"""

from __future__ import annotations

from typing import Iterable

import discord

from grayban.datatypes.blocklist_datatypes import PersonEntry

HELP_THUMBNAIL_URL = "https://cdn.discordapp.com/emojis/1337169044742078565.png"
HELP_FOOTER = "Gray System V3.5"

# -------------------- Rejections --------------------
NOT_ADMIN_BAN_REPORT = "❌ You must be an administrator to cast this spell!"
NOT_ADMIN_UNBAN_REPORT = "❌ You must be an administrator to reverse the curse!"
NOT_ADMIN_BAN = "❌ You must be an administrator to invoke this ritual!"
NOT_ADMIN_UNBAN = "❌ You must be an administrator to reverse this curse!"

INVALID_ID = "❌ Invalid ID, mortal!"
MISSING_ID = "❌ You must provide a valid ID, mortal!"
INVALID_LEVEL = "❌ Invalid level! Use 1 for a standard ban or 2 for banishing Roblox friends."
ALREADY_BANNED = "❌ This accursed ID is already banished from our realm!"
NOT_FOUND = "❌ This accursed ID was not found in the forbidden records!"
STORAGE_FAILURE = "⚠️ The ritual faltered... the forbidden records could not be reached. Try again later."

EMPTY_REPORTS = "ℹ️ There are no cursed IDs in our records... yet."
EMPTY_PERSONS = "ℹ️ There are no banished persons in our records... yet."


# -------------------- Report blocklist --------------------
def report_banned(entry_id: str) -> str:
    return (
        "**🔮 THE DARK RITUAL IS COMPLETE**\n"
        "```diff\n"
        f"- ID {entry_id} has been sacrificed to The Void\n"
        "+ Eternal Torment: Activated\n"
        "```\n"
        "🩸 *The shadows claim another soul...*"
    )


def report_unbanned(entry_id: str) -> str:
    return (
        "**🕳️ THE SEAL IS BROKEN**\n"
        "```diff\n"
        f"+ ID {entry_id} emerges from The Abyss\n"
        "- Chains of Damnation: Shattered\n"
        "```\n"
        "💀 *A soul escapes... but for how long?*"
    )


def report_status(entry_id: str, banned: bool) -> str:
    if banned:
        return f"❌ The ID {entry_id} remains banished from this realm!"
    return free_status(entry_id)


def report_list(ids: Iterable[str]) -> str:
    return f"📋 Cursed IDs: {', '.join(ids)}"


# -------------------- Person blocklist --------------------
def person_banned(entry_id: str, level: int) -> str:
    return f"✅ The ID {entry_id} has been banished with level {level}!"


def person_unbanned(entry_id: str) -> str:
    return f"✅ The ID {entry_id} has been released from its curse!"


def person_status(entry_id: str, entry: PersonEntry | None) -> str:
    if entry is not None:
        return f"❌ The ID {entry_id} remains banished with level {entry.level}!"
    return free_status(entry_id)


def person_list(entries: Iterable[PersonEntry]) -> str:
    listed = ", ".join(f"{entry.id} (Level {entry.level})" for entry in entries)
    return f"📋 Banished Persons: {listed}"


def free_status(entry_id: str) -> str:
    return f"✅ The ID {entry_id} is free... for now."


# -------------------- Moderation notices --------------------
def enforcement_notice(author_mention: str) -> str:
    return f"{author_mention}, your message has been obliterated for containing a cursed ID."


def build_help_embed(prefix: str = "!") -> discord.Embed:
    """Build the command reference embed shown by ``help``."""
    embed = discord.Embed(
        title="🩸 **Henry Infinity Commands** 🩸",
        color=discord.Color.from_rgb(0, 0, 0),
    )
    embed.set_thumbnail(url=HELP_THUMBNAIL_URL)
    embed.add_field(
        name="🔮 **REPORT SYSTEM**",
        value=(
            f"`{prefix}ban-report <ID>` » Admin only\n"
            f"`{prefix}unban-report <ID>` » Admin only\n"
            f"`{prefix}check-report <ID>`\n"
            f"`{prefix}list-report`"
        ),
        inline=False,
    )
    embed.add_field(
        name="💀 **PERSON SYSTEM**",
        value=(
            f"`{prefix}ban <ID> [level]` » Admin only\n"
            f"`{prefix}unban <ID>` » Admin only\n"
            f"`{prefix}check <ID>`\n"
            f"`{prefix}list`"
        ),
        inline=False,
    )
    embed.add_field(
        name="📌 **USAGE EXAMPLES**",
        value=f"`{prefix}ban 123456789 2`\n`{prefix}unban-report 987654321`",
        inline=False,
    )
    embed.set_footer(text=HELP_FOOTER)
    return embed
