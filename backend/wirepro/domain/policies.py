"""Report policies — mandatory sections, confidence tokens, hard rules.

These constants form the caller-visible contract of every answer, whichever
generation path produced it.
"""

# Mandatory sections, in the exact order they must appear (each + ":")
REPORT_SECTIONS: tuple[str, ...] = (
    "OBSERVATIONS",
    "COMPONENTS INVOLVED",
    "HYPOTHESES",
    "OPERATIONAL CHECKS",
    "REAL RISKS",
    "NEXT STEP",
)

HYPOTHESES_SECTION = "HYPOTHESES"

SECTION_PLACEHOLDER = "- (to be completed)"

NO_HYPOTHESIS_LINE = (
    "- [UNVERIFIABLE] No hypothesis can be formulated with the available data."
)

HARD_SAFETY_RULES: tuple[str, ...] = (
    "Never suggest bypassing, bridging or removing protections (RCD, MCB, fuses).",
    "Never suggest disconnecting earth or neutralising the residual-current device.",
    "If critical data is missing, write exactly: 'INSUFFICIENT DATA — needed: ...' "
    "and ask for at most 2 precise pieces of information.",
    "For electrical work: disconnect the supply and verify absence of voltage "
    "before opening any panel.",
    "If there is imminent risk (burning smell, sparks, blackened cables, water near "
    "live parts): stop and call an on-site technician.",
)

GOLDEN_RULES: tuple[str, ...] = (
    "Golden rule: always measure IN and OUT of every protection and verify under load.",
    "If voltage reads present but the circuit does not energise: suspect back-feed "
    "or floating voltage and verify with a load.",
    "OPERATIONAL CHECKS: every step must name the instrument (multimeter, clamp "
    "meter, megohmmeter), the exact measurement point and the expected value.",
    "OBSERVATIONS: only facts present in the text or visible in the photo. No inferences.",
    "COMPONENTS INVOLVED: only those named by the user or visible in the image.",
    "REAL RISKS: at most 3 lines, only concrete risks for this specific case.",
    "NEXT STEP: a single concrete action to do now, not a list.",
)

# Low-information phrases that must never reach the user. Answers may come
# back in Italian as well as English.
BANNED_PHRASES: tuple[str, ...] = (
    "could be anything",
    "hard to say without seeing it",
    "i recommend having it checked by a technician",
    "there could be a generic problem",
    "it could depend on many factors",
    "impossible to tell remotely",
    "i cannot know without further information",
    "potrebbe essere qualsiasi cosa",
    "consiglio di far controllare da un tecnico",
    "potrebbe esserci un problema generico",
    "difficile dirlo senza vedere",
    "potrebbe dipendere da molti fattori",
    "è impossibile dirlo a distanza",
    "non posso saperlo senza ulteriori informazioni",
)

# Localized headers accepted on input and rewritten to the canonical title
SECTION_ALIASES: dict[str, str] = {
    "OSSERVAZIONI": "OBSERVATIONS",
    "COMPONENTI COINVOLTI": "COMPONENTS INVOLVED",
    "IPOTESI": "HYPOTHESES",
    "VERIFICHE OPERATIVE": "OPERATIONAL CHECKS",
    "RISCHI REALI": "REAL RISKS",
    "PROSSIMO PASSO": "NEXT STEP",
}
