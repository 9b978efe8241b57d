"""Report rendering over the published snapshot.

Every function here is a pure function of a :class:`~fantasycricket.models.Snapshot`
(or of a player list) and returns plain text using ``**`` emphasis markers.
Rankings go through a polars frame built by :func:`player_frame`; sorts keep
snapshot order for ties.
"""

from __future__ import annotations

import dataclasses
import datetime as dt
import math
from typing import List, Mapping, Sequence, Tuple

import polars as pl

from .models import (
    AcquisitionStatus,
    Conditions,
    DewFactor,
    MatchFormat,
    PitchType,
    Player,
    ROLE_BUCKETS,
    Snapshot,
    utcnow,
)

CAPTAIN_POOL = 4
DIFFERENTIAL_CAPTAIN_OWNERSHIP = 30
TOP_FORM_COUNT = 5
VALUE_OWNERSHIP = 25
VALUE_FORM = 75
DIFFERENTIAL_OWNERSHIP = 25
DIFFERENTIAL_FORM = 70
PICK_LIMIT = 3

STILL_PROCESSING = "⏳ Still processing player data..."
INSUFFICIENT_COMPARISON = "⏳ Insufficient player data for comparison analysis."
NO_DIFFERENTIALS = (
    "🔍 No clear differential picks identified in current data. "
    "All high-form players have significant ownership."
)

PITCH_ASSESSMENTS: Mapping[PitchType, str] = {
    PitchType.BATTING: "High-scoring encounter expected. Batsmen will dominate. Pick aggressive stroke-makers.",
    PitchType.BOWLING: "Low-scoring match likely. Quality bowlers essential. Patient batsmen preferred.",
    PitchType.SPIN: "Spinners will be key. Pick experienced players against spin. Turn expected.",
    PitchType.BALANCED: "Even contest between bat and ball. Form and skill will decide outcomes.",
}

FORMAT_STRATEGIES: Mapping[MatchFormat, str] = {
    MatchFormat.T20: (
        "• **6 Batsmen** (including WK): Power-play and death specialists\n"
        "• **1-2 All-rounders**: Dual scoring opportunities\n"
        "• **4 Bowlers**: Wicket-takers over economy\n"
        "• **Focus**: Strike rates and explosive potential"
    ),
    MatchFormat.ODI: (
        "• **5-6 Batsmen**: Consistent run-scorers and anchors\n"
        "• **2 All-rounders**: Middle-overs specialists\n"
        "• **4-5 Bowlers**: Wicket-taking ability crucial\n"
        "• **Focus**: Consistency and building partnerships"
    ),
    MatchFormat.TEST: (
        "• **5-6 Batsmen**: Technique and patience\n"
        "• **1-2 All-rounders**: Session control\n"
        "• **5 Bowlers**: Long-format specialists\n"
        "• **Focus**: Discipline and sustained performance"
    ),
}

CONDITIONS_ADJUSTMENTS: Mapping[PitchType | None, str] = {
    PitchType.BATTING: (
        "• Load up on top-order batsmen (70% of batting budget)\n"
        "• Pick death bowlers and wicket-takers only\n"
        "• Consider extra batsman over 4th bowler\n"
        "• Avoid defensive players"
    ),
    PitchType.BOWLING: (
        "• Invest heavily in quality bowlers (40% total budget)\n"
        "• Pick patient, technical batsmen\n"
        "• All-rounders become premium picks\n"
        "• Avoid aggressive stroke-players"
    ),
    PitchType.SPIN: (
        "• Prioritize spinners and players good vs spin\n"
        "• Pick experienced players over young talent\n"
        "• Consider extra spinner in team composition\n"
        "• Avoid pace-heavy strategies"
    ),
    None: (
        "• Balanced approach across all positions\n"
        "• Form trumps conditions in neutral pitches\n"
        "• Standard team composition recommended\n"
        "• Monitor toss for final adjustments"
    ),
}

_FRAME_SCHEMA = {
    "position": pl.Int64,
    "name": pl.Utf8,
    "team": pl.Utf8,
    "role": pl.Utf8,
    "bucket": pl.Utf8,
    "form": pl.Int64,
    "price": pl.Int64,
    "ownership": pl.Int64,
    "venue_avg": pl.Int64,
}


def player_frame(players: Sequence[Player]) -> pl.DataFrame:
    """Tabulate ``players``; ``position`` indexes back into the sequence."""

    return pl.DataFrame(
        {
            "position": list(range(len(players))),
            "name": [p.name for p in players],
            "team": [p.team for p in players],
            "role": [p.role for p in players],
            "bucket": [p.bucket for p in players],
            "form": [p.form for p in players],
            "price": [p.price for p in players],
            "ownership": [p.ownership for p in players],
            "venue_avg": [p.venue_avg for p in players],
        },
        schema=_FRAME_SCHEMA,
    )


def _pick(players: Sequence[Player], frame: pl.DataFrame) -> List[Player]:
    return [players[index] for index in frame.get_column("position").to_list()]


def _by_form(frame: pl.DataFrame) -> pl.DataFrame:
    return frame.sort("form", descending=True, maintain_order=True)


def _half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def rank_by_form(players: Sequence[Player]) -> List[Player]:
    return _pick(players, _by_form(player_frame(players)))


def captain_picks(players: Sequence[Player]) -> Tuple[Player, Player] | None:
    """Return ``(safe, differential)`` or ``None`` for an empty pool.

    The differential is the first of ranks 2-4 owned by fewer than 30% of
    managers, else rank 2.  With a single player both picks are that player.
    """

    ranked = rank_by_form(players)
    if not ranked:
        return None
    safe = ranked[0]
    if len(ranked) == 1:
        return safe, safe
    contenders = ranked[1:CAPTAIN_POOL]
    differential = next(
        (p for p in contenders if p.ownership < DIFFERENTIAL_CAPTAIN_OWNERSHIP),
        ranked[1],
    )
    return safe, differential


def value_picks(players: Sequence[Player]) -> List[Player]:
    frame = _by_form(player_frame(players)).filter(
        (pl.col("ownership") < VALUE_OWNERSHIP) & (pl.col("form") > VALUE_FORM)
    )
    return _pick(players, frame.head(PICK_LIMIT))


def differential_candidates(players: Sequence[Player]) -> List[Player]:
    frame = (
        player_frame(players)
        .filter(
            (pl.col("ownership") < DIFFERENTIAL_OWNERSHIP)
            & (pl.col("form") > DIFFERENTIAL_FORM)
        )
        .sort("ownership", maintain_order=True)
    )
    return _pick(players, frame.head(PICK_LIMIT))


@dataclasses.dataclass(frozen=True, slots=True)
class Comparison:
    first: Player
    second: Player
    leader: Player | None
    better_value: Player
    differential: Player


def _price_to_form(player: Player) -> float:
    return player.price / player.form if player.form else math.inf


def compare_top_two(players: Sequence[Player]) -> Comparison | None:
    ranked = rank_by_form(players)
    if len(ranked) < 2:
        return None
    first, second = ranked[0], ranked[1]
    return Comparison(
        first=first,
        second=second,
        leader=first if first.form > second.form else None,
        better_value=first if _price_to_form(first) < _price_to_form(second) else second,
        differential=first if first.ownership < second.ownership else second,
    )


def position_leaders(snapshot: Snapshot) -> List[Tuple[str, Player]]:
    """Top form player per team and role bucket, in team then bucket order."""

    leaders: List[Tuple[str, Player]] = []
    for team in _teams(snapshot):
        squad = snapshot.squads_by_team.get(team)
        if squad is None:
            continue
        for bucket in ROLE_BUCKETS:
            ranked = rank_by_form(squad[bucket])
            if ranked:
                leaders.append((bucket, ranked[0]))
    return leaders


def form_summary(players: Sequence[Player]) -> dict[str, int]:
    frame = player_frame(players)
    form, ownership, price = pl.col("form"), pl.col("ownership"), pl.col("price")
    counts = frame.select(
        (form >= 90).sum().alias("elite"),
        (form < 70).sum().alias("struggling"),
        (form >= 85).sum().alias("strong"),
        (ownership > 50).sum().alias("template"),
        ((ownership >= 25) & (ownership <= 50)).sum().alias("medium_owned"),
        (ownership < 25).sum().alias("low_owned"),
        ((form > 80) & (price < 80)).sum().alias("price_efficient"),
    ).row(0, named=True)
    summary = {key: int(value or 0) for key, value in counts.items()}
    summary["players"] = frame.height
    summary["average_form"] = _half_up(frame["form"].mean()) if frame.height else 0
    return summary


def split_emphasis(text: str) -> List[Tuple[str, bool]]:
    """Split report text on ``**`` into ``(segment, emphasised)`` pairs."""

    return [
        (segment, index % 2 == 1)
        for index, segment in enumerate(text.split("**"))
        if segment
    ]


def _teams(snapshot: Snapshot) -> Sequence[str]:
    if snapshot.selected_event is not None:
        return list(dict.fromkeys(snapshot.selected_event.teams))
    return list(snapshot.squads_by_team)


def _unavailable(snapshot: Snapshot) -> str:
    return no_matches_report(snapshot) if not snapshot.events else STILL_PROCESSING


def _pitch(conditions: Conditions | None) -> str:
    return conditions.pitch_type.value if conditions else "unknown"


def _field(conditions: Conditions | None, name: str) -> object:
    if conditions is None:
        return "unknown"
    value = getattr(conditions, name)
    return value.value if isinstance(value, DewFactor) else value


def captain_analysis(snapshot: Snapshot) -> str:
    picks = captain_picks(snapshot.all_players())
    if picks is None:
        return STILL_PROCESSING
    safe, risky = picks
    event = snapshot.selected_event
    if event is None:
        return _unavailable(snapshot)
    conditions = snapshot.venue_conditions
    pitch = conditions.pitch_type if conditions else None

    if pitch is PitchType.BATTING:
        strategy = "Batting conditions favor aggressive captains"
    elif pitch is PitchType.BOWLING:
        strategy = "Consider bowler captains in tough conditions"
    else:
        strategy = "Balanced conditions - form is key"

    if risky is safe:
        differential = (
            f"**{risky.name} ({risky.team})**\n"
            "• Only one player in the pool, so no distinct differential captain exists"
        )
        recommendation = f"{safe.name} is the only available captain"
    else:
        differential = (
            f"**{risky.name} ({risky.team})**\n"
            f"• **AI Form Score:** {risky.form}/100\n"
            f"• **Ownership:** {risky.ownership}% (Low ownership!)\n"
            f"• **Price:** {risky.credits:.1f} credits\n"
            f"• **Risk Level:** {'Low Risk' if risky.form > 85 else 'Medium Risk'}"
        )
        recommendation = (
            f"{safe.name} for safe rank, {risky.name} for rank climbing"
            if safe.ownership > 50
            else f"{safe.name} offers best risk-reward balance"
        )

    return f"""🤖 **AI Captain Analysis**

**Data Source:** {snapshot.data_source}
**Match:** {event.name}
**AI Processing:** Live form analysis + venue optimization

**🛡️ Safe Captain Choice:**
**{safe.name} ({safe.team})**
• **AI Form Score:** {safe.form}/100 🔥
• **Ownership:** {safe.ownership}% (Template pick)
• **Price:** {safe.credits:.1f} credits
• **Role:** {safe.role}
• **Venue Average:** {safe.venue_avg}

**🎲 Differential Captain:**
{differential}

**🌤️ Conditions Impact:**
• **Pitch:** {_pitch(conditions)}
• **Weather:** {_field(conditions, "weather")}
• **Temperature:** {_field(conditions, "temperature")}°C
• **Strategy:** {strategy}

**AI Recommendation:** {recommendation}

*Analysis based on live data from {snapshot.data_source}*"""


def pitch_assessment(pitch: PitchType | None) -> str:
    if pitch is None:
        return "Standard cricket conditions expected."
    return PITCH_ASSESSMENTS[pitch]


def fantasy_impact(conditions: Conditions | None) -> str:
    if conditions is None:
        return "• Standard playing conditions\n• No major weather disruptions expected"
    lines: List[str] = []
    if conditions.dew_factor is DewFactor.HIGH:
        lines += ["• High dew = chasing team advantage", "• Spinners may struggle in 2nd innings"]
    else:
        lines += ["• Low dew = minimal impact on match", "• Both innings similar difficulty"]
    if conditions.wind_speed > 15:
        lines.append("• Strong winds = swing bowling advantage")
    if conditions.temperature > 30:
        lines.append("• Hot conditions = player fatigue factor")
    return "\n".join(lines)


def conditions_strategy(conditions: Conditions | None, match_format: MatchFormat) -> str:
    pitch = conditions.pitch_type if conditions else None
    if pitch is PitchType.BATTING:
        if match_format is MatchFormat.T20:
            return "Load up on explosive batsmen and death bowlers. Power-play specialists premium."
        return "Pick consistent run-scorers and wicket-taking bowlers. Big totals expected."
    if pitch is PitchType.BOWLING:
        return "Invest in quality bowlers and anchor batsmen. All-rounders become valuable."
    if pitch is PitchType.SPIN:
        return "Prioritize spinners and players good against spin. Experience matters."
    return "Balanced team composition. Pick in-form players regardless of specialization."


def weather_source(snapshot: Snapshot) -> str:
    if snapshot.synthetic:
        return "Simulated"
    conditions = snapshot.venue_conditions
    if conditions is not None and conditions.source == "live":
        return "Live Weather APIs"
    return "Generated (weather providers unavailable)"


def conditions_analysis(snapshot: Snapshot, *, now: dt.datetime | None = None) -> str:
    event = snapshot.selected_event
    if event is None:
        return _unavailable(snapshot)
    conditions = snapshot.venue_conditions
    updated = (now or utcnow()).strftime("%H:%M:%S UTC")
    return f"""🌤️ **AI Conditions Analysis**

**Live Venue Data:** {event.venue}
**Weather Source:** {weather_source(snapshot)}

**☁️ Current Weather:**
• **Condition:** {_field(conditions, "weather")}
• **Temperature:** {_field(conditions, "temperature")}°C
• **Humidity:** {_field(conditions, "humidity")}%
• **Wind:** {_field(conditions, "wind_speed")} km/h
• **Dew Factor:** {_field(conditions, "dew_factor")}

**🏏 Pitch Analysis:**
• **Type:** {_pitch(conditions)}
• **AI Assessment:** {pitch_assessment(conditions.pitch_type if conditions else None)}

**🎯 Fantasy Impact:**
{fantasy_impact(conditions)}

**⚡ AI Strategy Recommendation:**
{conditions_strategy(conditions, event.match_format)}

**🕒 Real-time Status:** {event.status}
**📊 Last Updated:** {updated}

*Conditions analysis powered by AI algorithms and live data*"""


def player_analysis(snapshot: Snapshot) -> str:
    players = snapshot.all_players()
    if not players:
        return STILL_PROCESSING
    ranked = rank_by_form(players)[:TOP_FORM_COUNT]
    values = value_picks(players)
    summary = form_summary(players)

    top_lines = "\n".join(
        f"{i}. **{p.name}** ({p.team})\n"
        f"   • Form: {p.form}/100 | Price: {p.credits:.1f}cr | Own: {p.ownership}%"
        for i, p in enumerate(ranked, start=1)
    )
    value_lines = (
        "\n".join(f"• **{p.name}** - Form: {p.form}/100, Ownership: {p.ownership}%" for p in values)
        if values
        else "No clear value picks identified in current data"
    )
    leaders = position_leaders(snapshot)
    leader_lines = (
        "\n".join(f"• **{bucket}**: {p.name} ({p.form}/100)" for bucket, p in leaders)
        if leaders
        else "Position analysis in progress..."
    )
    distribution = "favorable for high scorers" if summary["strong"] > 5 else "evenly spread"

    return f"""📊 **AI Player Analysis Engine**

**Data Processing:** {summary["players"]} players analyzed
**Source:** {snapshot.data_source}

**🔥 Top Form Players:**
{top_lines}

**💎 Value Picks (High Form, Low Ownership):**
{value_lines}

**🏏 Position-wise Leaders:**
{leader_lines}

**📈 Form Trends:**
• Players above 90 form: {summary["elite"]}
• Players below 70 form: {summary["struggling"]}
• Average form score: {summary["average_form"]}

**🎯 AI Insights:**
• Form distribution looks {distribution}
• Ownership concentration: {summary["template"]} template players
• Price efficiency opportunities detected: {summary["price_efficient"]}

*Real-time analysis powered by AI algorithms*"""


def team_recommendations(snapshot: Snapshot) -> str:
    conditions = snapshot.venue_conditions
    ranked = rank_by_form(snapshot.all_players())
    top = ranked[0] if ranked else None
    must_have = f"{top.name} (Form: {top.form}/100)" if top else "unknown (Form: unknown/100)"
    batting = conditions is not None and conditions.pitch_type is PitchType.BATTING
    high_dew = conditions is not None and conditions.dew_factor is DewFactor.HIGH
    return (
        f"• **Must-have Player**: {must_have}\n"
        f"• **Captain Choice**: {'Aggressive batsman' if batting else 'Consistent performer'}\n"
        "• **Value Pick**: Look for players with form > 80 and ownership < 30%\n"
        "• **Avoid**: Players below 70 form unless under 15% ownership\n"
        f"• **Toss Factor**: {'Favor chasing team players' if high_dew else 'Minimal impact expected'}"
    )


def team_strategy(snapshot: Snapshot) -> str:
    event = snapshot.selected_event
    if event is None:
        return _unavailable(snapshot)
    conditions = snapshot.venue_conditions
    match_format = event.match_format
    label = match_format.value
    is_t20 = match_format is MatchFormat.T20
    pitch = conditions.pitch_type if conditions else None
    adjustments = CONDITIONS_ADJUSTMENTS.get(pitch, CONDITIONS_ADJUSTMENTS[None])

    return f"""🏗️ **AI Team Building Strategy**

**Match Context:** {event.name}
**Format:** {label} | **Conditions:** {_pitch(conditions)}

**🎯 {label} Optimal Strategy:**
{FORMAT_STRATEGIES.get(match_format, FORMAT_STRATEGIES[MatchFormat.T20])}

**💰 Budget Allocation (100 credits):**
• **Premium Players (2-3):** 55-65 credits
• **Mid-range Value (4-5):** 25-35 credits
• **Budget Enablers (3-4):** 10-15 credits

**📊 Team Distribution:**
• **{event.teams[0]}:** {"6-7" if is_t20 else "6"} players
• **{event.teams[1]}:** {"4-5" if is_t20 else "5"} players

**🌤️ Conditions-Based Adjustments:**
{adjustments}

**🎲 Risk Management:**
• **Safe Core (60% budget):** Proven performers
• **Value Plays (25% budget):** Form players
• **Differentials (15% budget):** Low ownership gems

**⚡ AI Recommendations:**
{team_recommendations(snapshot)}

**🔄 Live Adjustments:**
Monitor team news, toss decisions, and late injury updates before deadline.

*Strategy optimized by AI based on current match conditions*"""


def _risk_label(player: Player) -> str:
    if player.form > 85:
        return "🟢 Low Risk"
    if player.form > 75:
        return "🟡 Medium Risk"
    return "🔴 High Risk"


def differential_picks(snapshot: Snapshot) -> str:
    players = snapshot.all_players()
    picks = differential_candidates(players)
    if not picks:
        return NO_DIFFERENTIALS
    summary = form_summary(players)
    blocks = "\n\n".join(
        f"**{i}. {p.name} ({p.team})**\n"
        f"• **Ownership**: {p.ownership}% (Very Low!)\n"
        f"• **Form**: {p.form}/100\n"
        f"• **Price**: {p.credits:.1f} credits\n"
        f"• **Role**: {p.role}\n"
        f"• **Risk Level**: {_risk_label(p)}"
        for i, p in enumerate(picks, start=1)
    )
    return f"""💎 **AI Differential Analysis**

**Low Ownership Gems Detected:**

{blocks}

**🎯 Differential Strategy:**
• These players could be **rank-climbing goldmines**
• While 70%+ pick template players, smart managers find these gems
• If any of these perform, you'll gain **hundreds of ranks**
• Perfect for GPP tournaments and rank climbing

**⚖️ Risk vs Reward:**
• Template team = safer average rank
• Differential picks = higher ceiling, risk of red arrows
• **AI Recommendation**: Use 1-2 differentials max in balanced teams

**📊 Ownership Analysis:**
• High ownership (>50%): {summary["template"]} players
• Medium ownership (25-50%): {summary["medium_owned"]} players
• Low ownership (<25%): {summary["low_owned"]} players

*Differential analysis powered by ownership algorithms*"""


def player_comparison(snapshot: Snapshot) -> str:
    comparison = compare_top_two(snapshot.all_players())
    if comparison is None:
        return INSUFFICIENT_COMPARISON
    a, b = comparison.first, comparison.second
    if comparison.leader is not None:
        verdict = f"**{a.name}** edges ahead with superior form ({a.form} vs {b.form})"
    else:
        verdict = "Form scores are very close - consider other factors"
    other = b if comparison.differential is a else a
    return f"""⚖️ **AI Player Comparison Engine**

**Head-to-Head Analysis:**

**{a.name} vs {b.name}**

**📊 Statistical Comparison:**
| Metric | {a.name} | {b.name} |
|--------|---------|---------|
| **Form** | {a.form}/100 | {b.form}/100 |
| **Price** | {a.credits:.1f}cr | {b.credits:.1f}cr |
| **Ownership** | {a.ownership}% | {b.ownership}% |
| **Role** | {a.role} | {b.role} |
| **Team** | {a.team} | {b.team} |

**🎯 AI Verdict:**
{verdict}

**💰 Value Analysis:**
**{comparison.better_value.name}** offers better value (lower price-to-form ratio)

**📈 Ownership Factor:**
**{comparison.differential.name}** is the differential pick ({comparison.differential.ownership}% vs {other.ownership}%)

**🔮 AI Recommendation:**
Choose based on your strategy - template safety vs differential upside.

*Want to compare specific players? Ask me: "Compare [Player A] vs [Player B]"*"""


def data_confidence(snapshot: Snapshot) -> str:
    return "85%" if snapshot.synthetic else "95%"


def match_insights(snapshot: Snapshot) -> str:
    event = snapshot.selected_event
    if event is None:
        return _unavailable(snapshot)
    return f"""🤖 **AI Match Intelligence Hub**

**Live Analysis:** {event.name}
**Data Confidence:** {data_confidence(snapshot)} ({snapshot.data_source})

**🎯 Available AI Features:**

**🏏 Player Intelligence:**
• "Best captain picks" - AI-powered recommendations
• "Player form analysis" - Dynamic performance metrics
• "Differential picks" - Low ownership gems
• "Player comparison" - Head-to-head analytics

**🌤️ Conditions Intelligence:**
• "Pitch analysis" - Venue-specific insights
• "Weather impact" - Real-time conditions
• "Toss factor" - Win probability analysis

**📊 Strategy Intelligence:**
• "Team building strategy" - Format-specific advice
• "Budget allocation" - Optimal spending plans
• "Risk management" - Safe vs aggressive picks

**🔍 Live Data Sources:**
• Match Status: {event.status}
• Venue: {event.venue}
• Format: {event.match_format.value}
• Tournament: {event.series}

**🚀 AI Capabilities:**
✅ Real-time data processing from multiple APIs
✅ Dynamic player stat generation
✅ Weather-integrated pitch analysis
✅ Algorithmic form calculations
✅ Ownership prediction models
✅ Value pick identification algorithms

**Ask me anything about fantasy cricket - I'm powered by live data and AI algorithms!**"""


CONNECTING_MESSAGE = "🔄 Connecting to live cricket data sources..."
PROCESSING_MESSAGE = "⏳ Processing live match data and generating player analytics..."
RETRY_MESSAGE = (
    "🔄 **Retrying Live Data Connection**\n\n"
    "Scanning all available cricket APIs and data sources..."
)


def no_matches_report(snapshot: Snapshot) -> str:
    if snapshot.acquisition_status is AcquisitionStatus.ERROR:
        status = "• Acquisition failed unexpectedly; see logs for details"
    else:
        status = "• All registered sources and mirrors: no usable matches"
    explanation = f"\n• {snapshot.explanation}" if snapshot.explanation else ""
    return f"""❌ **No Live Cricket Matches Found**

**Data Source Status:**
{status}{explanation}

**Reality Check:** There may be no cricket matches scheduled today, or all data sources are temporarily unavailable.

**When Cricket Typically Happens:**
• **IPL**: March-May (Evening matches 7:30 PM IST)
• **International**: Throughout year (varies by series)
• **Domestic**: Season-specific (varies by country)

**What you can do:**
• Check official cricket websites for today's schedule
• Try again later when matches are actually happening
• Ask me about general fantasy cricket strategy

**I won't generate fake data or pretend there are matches when there aren't any.** 🎯"""


def ready_report(snapshot: Snapshot) -> str:
    event = snapshot.selected_event
    if event is None:
        return no_matches_report(snapshot)
    provenance = (
        "⚠️ **Simulated Data:** no live source answered; fixtures and players are generated"
        if snapshot.synthetic
        else "✅ Match data from a live source; player stats are generated algorithmically"
    )
    return f"""✅ **Fantasy Cricket AI Assistant Ready!**

🌐 **Data Source:** {snapshot.data_source}
📊 **Live Matches:** {len(snapshot.events)} found
🎯 **Current Analysis:** {event.name}
🏆 **Tournament:** {event.series}
🏟️ **Venue:** {event.venue}
📈 **Format:** {event.match_format.value}
⚡ **Status:** {event.status}

{provenance}

Ask me anything about fantasy cricket strategy, player analysis, or match insights!

**Try:**
• "Best captain for this match"
• "Analyze pitch conditions"
• "Player form comparison"
• "Fantasy team strategy"
• "Weather impact analysis\""""


def suggested_questions(snapshot: Snapshot) -> List[str]:
    event = snapshot.selected_event
    if event is None:
        return [
            "Check data source status",
            "Retry API connections",
            "How does the AI system work?",
            "Available intelligence features",
        ]
    return [
        f"AI captain analysis for {event.name}",
        "Live pitch and weather conditions",
        "Player form rankings",
        "Differential picks strategy",
        "Team building optimization",
        "Match intelligence summary",
    ]


__all__ = [
    "CONNECTING_MESSAGE",
    "Comparison",
    "INSUFFICIENT_COMPARISON",
    "NO_DIFFERENTIALS",
    "PROCESSING_MESSAGE",
    "RETRY_MESSAGE",
    "STILL_PROCESSING",
    "captain_analysis",
    "captain_picks",
    "compare_top_two",
    "conditions_analysis",
    "data_confidence",
    "differential_candidates",
    "differential_picks",
    "form_summary",
    "match_insights",
    "no_matches_report",
    "player_analysis",
    "player_comparison",
    "player_frame",
    "position_leaders",
    "rank_by_form",
    "ready_report",
    "split_emphasis",
    "suggested_questions",
    "team_strategy",
    "value_picks",
]
