from urllib.parse import quote

from camp_events.db.schemas import Event, ShareLinks


def share_text(event: Event) -> str:
    return event.description or f"Check out: {event.title}"


def _encode(value: str) -> str:
    return quote(value, safe="")


def share_links(event: Event, base_url: str) -> ShareLinks:
    url = f"{base_url.rstrip('/')}/events/{event.id}"
    text = share_text(event)
    body = text + "\n\n" + url
    return ShareLinks(
        title=event.title,
        text=text,
        url=url,
        mailto=f"mailto:?subject={_encode(event.title)}&body={_encode(body)}",
        sms=f"sms:?body={_encode(event.title + ': ' + url)}",
    )
