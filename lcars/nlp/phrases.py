"""Fixed reply tables shared by the chat composer and the terminal."""

from __future__ import annotations

import random

GREETING_REPLY = "Hello! I'm your LCARS AI assistant. How can I help you today?"
THANKS_REPLY = "You're welcome! I'm always here to assist you."
TASK_USAGE_REPLY = "Usage: add task <title>. Example: 'add task calibrate the deflector array'."
ABOUT_REPLY = (
    "I'm the LCARS AI Console - a Star Trek-themed productivity dashboard. I can help "
    "with task management, weather info, analytics, and natural language processing."
)
API_REPLY = (
    "🤖 AI chat integration is ready to activate! Add your ANTHROPIC_API_KEY to the "
    "environment (or configure another LiteLLM provider under chat: in config.yaml) "
    "to enable advanced conversations."
)
DEFAULT_REPLY_TEMPLATE = (
    "I understand you're asking about: {text}. While I have basic natural language "
    "processing, configuring an AI chat provider will unlock much more powerful "
    "conversations and understanding. See the Settings panel for API configuration."
)

STATUS_REPORT = (
    "💚 SYSTEM STATUS: All LCARS systems NOMINAL\n"
    "  • Core: OPERATIONAL\n"
    "  • AI Module: READY\n"
    "  • Storage: ACTIVE"
)

SWALLOW_REPORT = (
    "🐦 SWALLOW ANALYSIS:\n"
    "African Swallow: Unladen airspeed ~24 mph (non-migratory)\n"
    "European Swallow: Unladen airspeed ~20.1 mph\n\n"
    "Note: Swallows cannot carry coconuts. Bridge of Death protocols do not apply here."
)

JOKES = (
    "Why do programmers prefer dark mode? Because light attracts bugs! 😄",
    "How many programmers does it take to change a light bulb? None, that's a hardware problem! 💡",
    "Why did the developer go broke? Because he used up all his cache! 💸",
    "There are 10 types of people: those who understand binary and those who don't. 🔢",
    "What's the object-oriented way to become wealthy? Inheritance! 💰",
)

FORTUNES = (
    "✨ 'The best way to predict the future is to invent it.' - Alan Kay",
    "💡 'Any sufficiently advanced technology is indistinguishable from magic.' - Arthur C. Clarke",
    "🚀 'Innovation distinguishes between a leader and a follower.' - Steve Jobs",
    "🌟 'The only way to do great work is to love what you do.' - Steve Jobs",
)

CAPTAIN_QUOTES: dict[str, tuple[str, ...]] = {
    "spock": (
        "🖖 'Live long and prosper.'",
        "🖖 'Logic is the beginning of wisdom, not the end.'",
        "🖖 'Change is the essential process of all existence.'",
        "🖖 'Fascinating.'",
    ),
    "picard": (
        "👨‍✈️ 'Make it so.'",
        "👨‍✈️ 'Engage!'",
        "👨‍✈️ 'Tea. Earl Grey. Hot.'",
        "👨‍✈️ 'Things are only impossible until they're not.'",
        "👨‍✈️ 'The line must be drawn here!'",
        "👨‍✈️ 'There are four lights!'",
    ),
    "sisko": (
        "⚾ 'It's easy to be a saint in paradise.'",
        "⚾ 'I can live with it.'",
        "⚾ 'If you want to know who you are, it's important to know who you were.'",
        "⚾ 'Sometimes the only way to save a life is to take one.'",
        "⚾ 'I am far more than just another Starfleet captain.'",
        "⚾ 'In the Pale Moonlight...'",
    ),
    "janeway": (
        "☕ 'Coffee. Black.'",
        "☕ 'There's coffee in that nebula!'",
        "☕ 'Do it.'",
        "☕ 'We're Starfleet officers. Weird is part of the job.'",
        "☕ 'Time's up!'",
        "☕ 'I don't break rules, but I bend them... a lot.'",
    ),
    "archer": (
        "🐕 'Let's see what's out there.'",
        "🐕 'We're going to stumble, make mistakes... but we're going to keep going.'",
        "🐕 'Where no man has gone before.'",
        "🐕 'We can't turn tail every time we get slapped.'",
        "🐕 'Someday, my people are going to come up with some sort of a doctrine.'",
        "🐕 'This is why we're out here, Doctor.'",
    ),
    "mariner": (
        "🍺 'Second contact is where the magic happens!'",
        "🍺 'I know every loophole, every exploit, every-'",
        "🍺 'Actually, that's pretty badass.'",
        "🍺 'Don't overthink it!'",
        "🍺 'We're the Cerritos! We're the best at being the worst!'",
        "🍺 'Classic Starfleet hubris.'",
    ),
}

REDSHIRT_FATES = (
    "💀 Killed by alien life form on away mission",
    "⚡ Vaporized by unknown energy weapon",
    "🪨 Crushed by falling rocks on Class M planet",
    "👾 Assimilated by the Borg",
    "🌌 Lost in transporter malfunction",
    "🔥 Consumed by plasma fire",
    "✨ Actually survived! (Rare outcome)",
)


def pick(table: tuple[str, ...], rng: random.Random | None = None) -> str:
    """Uniform choice from a reply table."""
    return (rng or random).choice(table)
