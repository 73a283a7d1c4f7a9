"""Server-Sent Events frame encoding."""

KEEPALIVE_FRAME = ": keepalive\n\n"


def format_event(event: str, data: str) -> str:
    """Encode one named SSE event.

    Multi-line payloads are split across ``data:`` lines so the frame
    boundary (a blank line) cannot appear inside the payload.
    """
    lines = "".join(f"data: {line}\n" for line in data.split("\n"))
    return f"event: {event}\n{lines}\n"
