from __future__ import annotations

import random

import discord

WARNING_HEADLINES = (
    "🚨 **EVACUATION ALERT** 🚨",
    "⏰ **HEADS UP: this voice channel closes in {delay}!**",
    "🎭 **LAST CALL**: the channel is about to close!",
    "🎯 **T-MINUS {delay}** before everyone is disconnected!",
)


def fmt_seconds(seconds: int) -> str:
    seconds = max(0, int(seconds))
    h = seconds // 3600
    m = (seconds % 3600) // 60
    s = seconds % 60
    if h > 0:
        return f"{h}h {m}m"
    if m > 0:
        return f"{m}m {s}s" if s else f"{m}m"
    return f"{s}s"


def audit_line(member_name: str, channel_name: str) -> str:
    return f"🔇 {member_name} disconnected from {channel_name}"


def warning_message(members: list[discord.Member], delay_seconds: int, warning_only: bool, pick: int | None = None) -> str:
    if pick is None:
        pick = random.randrange(len(WARNING_HEADLINES))
    headline = WARNING_HEADLINES[pick % len(WARNING_HEADLINES)].format(delay=fmt_seconds(delay_seconds))
    mentions = " ".join(m.mention for m in members)

    if warning_only:
        tail = "🙏 Please leave the voice channel."
    else:
        tail = (
            f"⏳ You have **{fmt_seconds(delay_seconds)}** to leave on your own.\n"
            f"🤖 After that, everyone still here is disconnected."
        )
    return f"{headline}\n\n{mentions}\n\n{tail}"


def report_summary(report, channel_id: int) -> str:
    """One reply for a manual kick."""
    if report.skipped:
        return "⏳ A sweep is already running. Try again in a moment."

    if report.advisory is not None:
        text = f"❌ **Sweep failed** ({report.advisory.kind})\n{report.advisory.message}"
        if report.advisory.hint:
            text += f"\n{report.advisory.hint}"
        return text

    if not report.outcomes:
        if report.warned:
            return f"📢 Warned {report.warned} member(s) in <#{channel_id}>. Nobody was disconnected."
        return "✅ **Sweep done**\nNobody was connected to the channel."

    lines = [f"✅ **Sweep done**\n{len(report.succeeded)}/{len(report.outcomes)} member(s) disconnected from <#{channel_id}>."]
    for o in report.failed:
        lines.append(f"- ⚠️ {o.member_name}: {o.error}")
    return "\n".join(lines)[:1900]


def schedule_text(settings) -> str:
    if settings.sweep_times:
        times = ", ".join(t.strftime("%H:%M:%S" if t.second else "%H:%M") for t in settings.sweep_times)
        return f"Daily at {times} UTC"
    return f"Every {fmt_seconds(settings.sweep_interval_seconds)}"


def _channel_ref(channel_id: int | None) -> str:
    return f"<#{channel_id}>" if channel_id else "None"


def status_embed(*, settings, loop_running: bool, busy: bool, last_report=None) -> discord.Embed:
    embed = discord.Embed(title="🤖 Voice Sweeper")

    embed.add_field(name="Watched channel", value=_channel_ref(settings.channel_id), inline=True)
    embed.add_field(name="Log channel", value=_channel_ref(settings.log_channel_id), inline=True)
    embed.add_field(name="Warning channel", value=_channel_ref(settings.warning_channel_id), inline=True)

    embed.add_field(
        name="Schedule",
        value=(
            f"**{schedule_text(settings)}**\n"
            f"Loop running: `{loop_running}` | Sweeping now: `{busy}`"
        ),
        inline=False,
    )

    if settings.warning_channel_id:
        embed.add_field(
            name="Warnings",
            value=(
                f"Delay: **{fmt_seconds(settings.warning_delay_seconds)}**\n"
                f"Warning only: `{settings.warning_only}`"
            ),
            inline=False,
        )

    if last_report is not None:
        if last_report.advisory is not None:
            last = f"❌ {last_report.advisory.kind}: {last_report.advisory.message}"
        elif last_report.skipped:
            last = "⏭️ skipped (previous sweep still running)"
        else:
            last = f"{len(last_report.succeeded)}/{len(last_report.outcomes)} disconnected"
        embed.add_field(name="Last sweep", value=last, inline=False)

    embed.set_footer(text=f"Tip: {settings.command_prefix}kick sweeps right now")
    return embed


def permission_denied_message(required, actual=None) -> str:
    if actual is not None:
        return (
            "❌ **Access denied**\n"
            f"Your level: {actual.label}\n"
            f"Required level: {required.label}\n\n"
            "💡 Ask an administrator for the permissions you need."
        )
    return (
        "❌ **Access denied**\n"
        "You are not allowed to use this command.\n"
        f"Required level: {required.label}\n\n"
        "💡 Ask an administrator to add you to the whitelist."
    )
