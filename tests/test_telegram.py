from unittest.mock import Mock, patch

from sncf_watch.models.events import EventKind, OfferEvent
from sncf_watch.notifier.telegram import (
    format_offer_message,
    send_offer_event,
    split_message_for_telegram,
)


def make_event(make_proposal, make_offer, kind=EventKind.NEW_PROPOSAL):
    proposal = make_proposal(
        "T1",
        first=[make_offer("49,00 €", comfort="1re classe", title="Premiere")],
        second=[make_offer("45,00 €")],
    )
    return OfferEvent("Paris-Lyon on 2025-06-01", kind, proposal, tuple(proposal.all_offers()))


def test_new_proposal_message(make_proposal, make_offer):
    message = format_offer_message(make_event(make_proposal, make_offer))
    lines = message.splitlines()

    assert lines[0] == "<b>Paris-Lyon on 2025-06-01</b>"
    assert lines[1] == "--- Nouvelle offre directe trouvée! ---"
    assert "Départ : 08:15 dim. 1 juin" in lines
    assert "Arrivée : 10:12 dim. 1 juin" in lines
    assert "Durée : 1h57" in lines
    assert "- 1er classe : 49,00 €" in lines
    assert "- 2de classe : 45,00 €" in lines
    assert '<a href="https://www.sncf-connect.com/">SNCF Connect</a>' in message


def test_update_message_names_departure_time(make_proposal, make_offer):
    message = format_offer_message(make_event(make_proposal, make_offer, EventKind.UPDATED_PROPOSAL))

    assert message.splitlines()[1] == "--- Nouvelle(s) offre(s) pour le train de 08:15 ---"


def test_labels_are_html_escaped(make_proposal, make_offer):
    proposal = make_proposal("T1", transporter="TGV <Direct> & co", second=[make_offer("45,00 €")])
    event = OfferEvent("A&B on 2025-06-01", EventKind.NEW_PROPOSAL, proposal, tuple(proposal.all_offers()))

    message = format_offer_message(event)

    assert "<b>A&amp;B on 2025-06-01</b>" in message
    assert "Type : TGV &lt;Direct&gt; &amp; co" in message


def test_split_message_for_telegram():
    text = "\n".join(["x" * 30] * 10)

    chunks = split_message_for_telegram(text, max_length=100)

    assert all(len(chunk) <= 100 for chunk in chunks)
    assert "\n".join(chunks) == text


@patch("sncf_watch.notifier.telegram.requests.post")
def test_send_offer_event_posts_html(mock_post, make_proposal, make_offer):
    mock_post.return_value = Mock(status_code=200)

    send_offer_event("TOKEN", "42", make_event(make_proposal, make_offer))

    mock_post.assert_called_once()
    url = mock_post.call_args.args[0]
    payload = mock_post.call_args.kwargs["json"]
    assert url == "https://api.telegram.org/botTOKEN/sendMessage"
    assert payload["chat_id"] == "42"
    assert payload["parse_mode"] == "HTML"
    assert payload["text"].startswith("<b>Paris-Lyon on 2025-06-01</b>")


@patch("sncf_watch.notifier.telegram.requests.post")
def test_send_offer_event_logs_http_error(mock_post, make_proposal, make_offer, caplog):
    mock_post.return_value = Mock(status_code=401, text="Unauthorized")

    send_offer_event("TOKEN", "42", make_event(make_proposal, make_offer))

    assert any("Unauthorized" in record.getMessage() for record in caplog.records)


def test_split_keeps_markup_balanced_on_oversized_line():
    text = "<b>" + "A&amp;B " * 40 + "</b>\n" + '<a href="https://www.sncf-connect.com/">SNCF Connect</a>'

    chunks = split_message_for_telegram(text, max_length=100)

    assert all(len(chunk) <= 100 for chunk in chunks)
    for chunk in chunks:
        assert chunk.count("<b>") == chunk.count("</b>")
        assert chunk.count("<a ") == chunk.count("</a>")
        assert chunk.count("&") == chunk.count("&amp;")
    assert "".join(chunks[:-1]) == "A&amp;B " * 40
    assert chunks[-1] == '<a href="https://www.sncf-connect.com/">SNCF Connect</a>'
