"""Prompts for weekly market event research."""

from datetime import date

from market_events.events.models import EventType
from market_events.events.weeks import format_long_date, week_end

SYSTEM_PROMPT = (
    "You are a financial analyst specializing in market-moving events. "
    "Use the available tools to research current market events and provide "
    "accurate, timely information."
)

MIN_EVENTS = 10
MAX_EVENTS = 15

_EXAMPLE_OUTPUT = """[
  {
    "date": "December 1 2025",
    "event": "US ISM Manufacturing PMI",
    "type": "Economic",
    "description": "Manufacturing activity gauge released at 10:00 AM ET. Consensus 48.5 vs prior 47.8. A miss would reinforce rate-cut expectations.",
    "significance": "High",
    "marketSentiment": "Mixed"
  }
]"""


def _format_event_types() -> str:
    return ", ".join(f'"{event_type.value}"' for event_type in EventType)


def build_prompt(week_start: date) -> str:
    """Build the research prompt for the week starting at ``week_start``.

    Pure function: the same week always produces the same text.
    """
    period = f"{format_long_date(week_start)} to {format_long_date(week_end(week_start))}"

    return f"""You are a financial analyst researching CURRENT market-moving events. Use your research tools (web search, social/X search, or whatever search tools are available to you) to find real information about significant events taking place during the week of {period}. Do not invent events, dates or figures: every event must come from your research.

<research_instructions>
1. Search official economic calendars, central bank schedules, earnings calendars and reputable financial news for this week
2. Check recent social media and analyst commentary for breaking developments and market expectations
3. Only include events that actually occur between {period}, not hypothetical future events
4. Capture specific dates, release times and consensus expectations where available
</research_instructions>

<event_types>
Research all of the following:
- Economic data releases (GDP, inflation, employment, PMI, retail sales)
- Central bank meetings, rate decisions and press conferences
- Corporate earnings reports and guidance
- Geopolitical developments, trade negotiations and conflicts
- Regulatory announcements and policy changes
- Cryptocurrency market events (ETF decisions, network upgrades, token unlocks)
- Market holidays and early closures

Classify every event with exactly one of these types: {_format_event_types()}
</event_types>

<output_format>
Respond with a JSON array of objects. Each object must have exactly these fields:
- "date": exact date such as "December 1 2025", or a date range such as "December 1-3 2025"
- "event": the official event name
- "type": one of the event types listed above
- "description": what the event is, when it happens, expected outcome and potential market impact
- "significance": "High", "Medium" or "Low", based on historical market impact
- "marketSentiment": "Bullish", "Bearish", "Neutral" or "Mixed", based on the expected outcome

Example:
{_EXAMPLE_OUTPUT}
</output_format>

Generate {MIN_EVENTS}-{MAX_EVENTS} events based on your research findings, focusing on events with confirmed dates this week. Return only the JSON array."""
