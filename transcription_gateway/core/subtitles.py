"""WebVTT to SubRip conversion.

Best effort: cues are renumbered, timings are rewritten with the SRT
millisecond separator and cue settings are dropped. Lines that are neither
timings nor cue text (identifiers, stray notes) are skipped instead of
failing the whole document. Timestamps are not validated.

The conversion is one-way. An SRT document has no ``WEBVTT`` header, so
feeding one back in consumes its first cue as the header.
"""

TIMING_SEPARATOR = "-->"


def _srt_timestamp(value: str) -> str:
    # VTT "00:00:01.500" -> SRT "00:00:01,500"
    return value.replace(".", ",", 1)


def _srt_timing(line: str) -> str:
    sides = []
    for side in line.split(TIMING_SEPARATOR):
        tokens = side.split()
        # "00:00:01.000 align:start position:10%" keeps only the timestamp
        sides.append(_srt_timestamp(tokens[0] if tokens else ""))
    return f" {TIMING_SEPARATOR} ".join(sides)


def vtt_to_srt(vtt: str) -> str:
    """Render a WebVTT document as SRT.

    Args:
        vtt: WebVTT markup, ``\\n`` or ``\\r\\n`` line endings.

    Returns:
        The SRT document, one blank line after every cue.
    """
    lines = vtt.replace("\r\n", "\n").split("\n")
    total = len(lines)
    out: list[str] = []
    i = 0

    # Header block, then the blank lines separating it from the first cue
    while i < total and lines[i].strip():
        i += 1
    while i < total and not lines[i].strip():
        i += 1

    cue_index = 1
    while i < total:
        line = lines[i].strip()
        i += 1
        if TIMING_SEPARATOR not in line:
            continue

        out.append(str(cue_index))
        cue_index += 1
        out.append(_srt_timing(line))
        while i < total and lines[i].strip():
            out.append(lines[i])
            i += 1
        out.append("")

    return "\n".join(out)
