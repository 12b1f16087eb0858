"""Report composer — builds the diagnostic pre-analysis and renders its two views.

The context view is injected ahead of a generative call; the standalone view
is a complete answer used when no generation provider can be reached.
"""

from wirepro.application.services.hypothesis_builder import build_all
from wirepro.application.services.knowledge_matcher import KnowledgeMatcher, Query
from wirepro.application.services.prompt_builder import classify_domain, section_list
from wirepro.application.services.text_normalizer import contains_any, find_matches
from wirepro.domain.entities import (
    Confidence,
    DiagnosticReport,
    DomainFlags,
    Hypothesis,
)
from wirepro.infrastructure.logging.colored_logger import PipelineLogger, PipelineStage

log = PipelineLogger("ReportComposer")

# ── Keyword triggers ────────────────────────────────────────────────

TECH_KEYWORDS: tuple[str, ...] = (
    "tensione", "volt", "230v", "400v", "24v",
    "differenziale", "rcd", "rcbo", "magnetoterm", "mcb",
    "contattore", "rele", "relay", "bobina",
    "quadro", "impianto", "morsett",
    "plc", "automazione", "ingresso", "uscita",
    "terra", "neutro", "fase", "dispersione",
    "cortocircuito", "sovraccarico", "fusibile", "sezionatore",
    "bruciato", "fuma", "scintille", "odore",
    "corrente", "misura", "multimetro", "pinza",
    "isolamento", "megohmetro",
    "ip44", "ip65", "guarnizione", "pressacavi",
    "caldaia", "termostato", "circolatore", "pompa",
    "shelly", "zigbee", "domotica",
)

DANGER_KEYWORDS: tuple[str, ...] = (
    "bruciato", "fuma", "fumo", "scintille", "scintilla",
    "odore bruciato", "cavo annerito", "incendio", "fiamma",
)

VOLTAGE_KEYWORDS: tuple[str, ...] = ("tensione", "volt", "230v", "400v", "24v", "vac", "vdc")
RCD_KEYWORDS: tuple[str, ...] = ("differenziale", "rcd", "rcbo", "salvavita", "scatta")
OUTDOOR_KEYWORDS: tuple[str, ...] = (
    "esterno", "ip44", "ip65", "ip67", "cassetta", "guarnizione", "pressacavi",
)
MEASUREMENT_KEYWORDS: tuple[str, ...] = ("misura", "multimetro", "pinza", "megohmetro", "tester")

# ── Fixed checklists ────────────────────────────────────────────────

VOLTAGE_CHECKS: tuple[str, ...] = (
    "MANDATORY: measure voltage IN and OUT of every protection under load (VAC multimeter).",
)
RCD_CHECKS: tuple[str, ...] = (
    "MANDATORY: measure cable insulation with a 500V DC megohmmeter (>1MΩ required).",
    "Verify that N and PE are not joined downstream of the main equipotential node.",
)
OUTDOOR_CHECKS: tuple[str, ...] = (
    "Verify the perimeter gasket is intact (elastic, continuous, compressed).",
    "Verify cable glands are tightened and unused holes have blind caps.",
)

DANGER_RISKS: tuple[str, ...] = (
    "IMMEDIATE DANGER: de-energize before any intervention. Wait 5 minutes.",
    "Do not reopen until the burning smell has gone.",
)
GENERIC_RISK = "De-energize and verify absence of voltage with a multimeter before opening the panel."

MAX_KEYWORDS_SHOWN = 6
MAX_CHECKS_PER_PATTERN = 4
MAX_STEPS_PER_RULE = 2
MAX_VERIFICATIONS = 10
RISK_TEXT_LIMIT = 130

CONTEXT_MAX_HYPOTHESES = 6
CONTEXT_MAX_VERIFICATIONS = 6
STANDALONE_MAX_HYPOTHESES = 5
STANDALONE_MAX_CHECKS = 5
STANDALONE_MAX_RISKS = 3

OFFLINE_NOTE = (
    "⚠️ Note: answer generated locally (offline diagnostic engine), "
    "no generation provider was reachable."
)

# Built-in self-test request (RCD trips when the outdoor lights switch on)
TEST_CASE: dict[str, object] = {
    "message": (
        "Ogni volta che premo il pulsante per accendere le luci esterne il differenziale "
        "scatta. Ho un rele che pilota il contattore KM1. La linea e 230V. "
        "Come faccio a capire la causa?"
    ),
    "has_image": False,
}


def _append_unique(target: list[str], items) -> None:
    for item in items:
        if item not in target:
            target.append(item)


class ReportComposer:
    """Builds a ``DiagnosticReport`` for a request and renders it."""

    def __init__(self, matcher: KnowledgeMatcher):
        self._matcher = matcher

    def analyze(self, message: str | None, *, has_image: bool = False) -> DiagnosticReport:
        text = str(message or "").strip()
        query = Query(text)

        flags = DomainFlags(
            is_technical=contains_any(text, TECH_KEYWORDS),
            is_dangerous=contains_any(text, DANGER_KEYWORDS),
            mentions_voltage=contains_any(text, VOLTAGE_KEYWORDS),
            mentions_rcd=contains_any(text, RCD_KEYWORDS),
            mentions_outdoor=contains_any(text, OUTDOOR_KEYWORDS),
            mentions_measurement=contains_any(text, MEASUREMENT_KEYWORDS),
        )
        keywords = find_matches(text, TECH_KEYWORDS)

        patterns = self._matcher.match_patterns(query)
        rules = self._matcher.match_rules(
            query,
            risk_signal=flags.mentions_outdoor or flags.mentions_rcd or flags.is_dangerous,
        )
        for match in patterns:
            log.detail("Pattern matched", id=match.entry.id, score=match.score)
        for match in rules:
            log.detail("Rule matched", id=match.entry.id, score=match.score)

        # Observations
        observations: list[str] = []
        if keywords:
            shown = ", ".join(keywords[:MAX_KEYWORDS_SHOWN])
            observations.append(f"Technical keywords detected: {shown}.")
        if has_image:
            observations.append("Image attached: analyse the visible components and their condition.")
        if flags.is_dangerous:
            observations.append("WARNING: dangerous elements reported (burnt/smoke/sparks).")
        if flags.mentions_rcd:
            observations.append("RCD mentioned: leakage and insulation must be verified.")
        if flags.mentions_outdoor:
            observations.append("Outdoor box/panel mentioned: IP rating and sealing must be assessed.")
        if flags.mentions_measurement:
            observations.append("Electrical measurement requested: state instruments and measuring points.")
        for match in patterns:
            observations.append(f"Pattern identified: {match.entry.symptom}")

        hypotheses = build_all(match.entry for match in patterns)

        # Verifications
        verifications: list[str] = []
        if flags.mentions_voltage:
            verifications.extend(VOLTAGE_CHECKS)
        if flags.mentions_rcd:
            verifications.extend(RCD_CHECKS)
        if flags.mentions_outdoor:
            verifications.extend(OUTDOOR_CHECKS)
        for match in patterns:
            _append_unique(verifications, match.entry.checks[:MAX_CHECKS_PER_PATTERN])
        for match in rules:
            _append_unique(verifications, match.entry.verification_steps[:MAX_STEPS_PER_RULE])

        # Risks
        risks: list[str] = []
        if flags.is_dangerous:
            risks.extend(DANGER_RISKS)
        for match in rules:
            rule = match.entry
            if rule.is_high_risk:
                risks.append(f"HIGH RISK — {rule.title}: {rule.body[:RISK_TEXT_LIMIT]}")
        if flags.is_technical and not risks:
            risks.append(GENERIC_RISK)

        report = DiagnosticReport(
            flags=flags,
            conclusion=self._conclusion(flags, len(patterns)),
            has_image=has_image,
            domain=classify_domain(text),
            matched_keywords=tuple(keywords),
            matched_patterns=tuple(m.entry.id for m in patterns),
            matched_rules=tuple(m.entry.id for m in rules),
            observations=tuple(observations),
            hypotheses=tuple(hypotheses),
            verifications=tuple(verifications[:MAX_VERIFICATIONS]),
            risks=tuple(risks),
            pattern_scores={m.entry.id: m.score for m in patterns},
            rule_scores={m.entry.id: m.score for m in rules},
        )
        log.step_complete(
            PipelineStage.ANALYSIS,
            "Pre-analysis ready",
            technical=flags.is_technical,
            dangerous=flags.is_dangerous,
            patterns=len(patterns),
            rules=len(rules),
        )
        return report

    @staticmethod
    def _conclusion(flags: DomainFlags, pattern_count: int) -> str:
        if not flags.is_technical:
            return "Non-technical request: answer freely."
        if flags.is_dangerous:
            return "STOP — dangerous condition. Safety before diagnosis."
        if pattern_count:
            return (
                f"{pattern_count} failure pattern(s) identified. "
                "Guide the user through sequential verifications."
            )
        return "Generic technical question. Ask for specifics: brand/model, measurements, photo."

    # ── Renderings ──────────────────────────────────────────────────

    @staticmethod
    def render_context(report: DiagnosticReport) -> str:
        """Bullet pre-analysis for a generative provider; empty for non-technical requests."""
        if not report.is_technical:
            return ""

        lines = ["[DIAGNOSTIC ENGINE — AUTOMATIC PRE-ANALYSIS]"]
        if report.is_dangerous:
            lines += ["", "⚠️⚠️ DANGEROUS CONDITION — SAFETY FIRST ⚠️⚠️"]

        if report.observations:
            lines += ["", "PRELIMINARY OBSERVATIONS:"]
            lines += [f"- {o}" for o in report.observations]

        if report.hypotheses:
            lines += ["", "HYPOTHESES (to be confirmed by measurement):"]
            lines += [f"- {h.render()}" for h in report.hypotheses[:CONTEXT_MAX_HYPOTHESES]]

        if report.verifications:
            lines += ["", "VERIFICATIONS TO PROPOSE:"]
            lines += [f"- {v}" for v in report.verifications[:CONTEXT_MAX_VERIFICATIONS]]

        if report.risks:
            lines += ["", "RISKS / SAFETY:"]
            lines += [f"- {r}" for r in report.risks]

        lines.append("")
        lines.append(f"ENGINE CONCLUSION: {report.conclusion}")
        lines.append(
            "INSTRUCTION: use this pre-analysis as the structural basis. "
            f"The mandatory answer format is: {section_list()}."
        )
        return "\n".join(lines)

    @staticmethod
    def render_standalone(report: DiagnosticReport) -> str:
        """Complete six-section answer built only from the report."""
        lines = ["OBSERVATIONS:"]
        if report.observations:
            lines += [f"- {o}" for o in report.observations]
        else:
            lines.append("- Technical request received (local analysis, generation provider unreachable).")

        lines += ["", "COMPONENTS INVOLVED:"]
        if report.matched_keywords:
            shown = ", ".join(report.matched_keywords[:MAX_KEYWORDS_SHOWN])
            lines.append(f"- {shown} (from keywords).")
        else:
            lines.append("- No specific component identified automatically.")

        lines += ["", "HYPOTHESES:"]
        if report.hypotheses:
            lines += [f"- {h.render()}" for h in report.hypotheses[:STANDALONE_MAX_HYPOTHESES]]
        else:
            fallback = Hypothesis(
                cause="Insufficient data to formulate a precise hypothesis.",
                confidence=Confidence.UNVERIFIABLE,
            )
            lines.append(f"- {fallback.render()}")
            lines.append("  Provide brand/model, measurements already taken and a photo of the component.")

        lines += ["", "OPERATIONAL CHECKS:"]
        if report.verifications:
            lines += [
                f"{i}) {v}"
                for i, v in enumerate(report.verifications[:STANDALONE_MAX_CHECKS], start=1)
            ]
        else:
            lines.append("1) Instrument: VAC multimeter. Measure voltage IN and OUT of the RCD.")
            lines.append("2) Instrument: 500V megohmmeter. Measure cable insulation (expected value >1MΩ).")
            lines.append("3) State brand/model and what has already been checked.")

        lines += ["", "REAL RISKS:"]
        if report.risks:
            lines += [f"- {r}" for r in report.risks[:STANDALONE_MAX_RISKS]]
        else:
            lines.append("- De-energize and verify absence of voltage before any intervention.")

        lines += ["", "NEXT STEP:"]
        if report.verifications:
            lines.append(f"- {report.verifications[0]}")
        else:
            lines.append("- Send a sharp photo of the component and state brand/model.")

        lines += ["", OFFLINE_NOTE]
        return "\n".join(lines)
