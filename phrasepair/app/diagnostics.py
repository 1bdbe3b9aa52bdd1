from __future__ import annotations

_TRACEBACK_NOISE = ("File ", "^", "Traceback ")


def summarize_exception(detail: str, *, max_len: int = 220) -> str:
    """Last line of a traceback-ish text that says what went wrong, clipped to max_len."""
    lines = [ln.strip() for ln in str(detail or "").splitlines() if ln.strip()]
    if not lines:
        return "Unknown error."
    meaningful = [ln for ln in lines if not ln.startswith(_TRACEBACK_NOISE)]
    out = (meaningful or lines)[-1]
    if len(out) > max_len:
        return out[: max_len - 3].rstrip() + "..."
    return out


def hint_for_exception(summary: str) -> str:
    s = str(summary or "").lower()
    if "api key" in s:
        return "Set OPENAI_API_KEY to a valid key, or run with --translator argos --tts edge."
    if "rate limit" in s:
        return "The service is throttling requests. Wait a moment, then regenerate audio."
    if "model not found" in s:
        return "Pick a model your account can use with --model."
    if "no module named" in s or "is not installed" in s:
        return "A required package is missing in this virtualenv. Reinstall dependencies and retry."
    if "config file not found" in s:
        return "Configured JSON file is missing. Update the config path or restore the file."
    if "audio output" in s or "decode audio" in s:
        return "Audio playback failed. Check --list-devices and that ffmpeg is installed."
    return "Check logs for full traceback."
