"""
Shared test fixtures for the draftsplice test suite.
"""
import json

import pytest

from draftsplice.models.completion import ProviderSettings


# ==========================================================================
# Compose bodies
# ==========================================================================

@pytest.fixture
def outlook_clean_html():
    """Outlook reply as it looks when the compose window opens."""
    return (
        "<html><head><style>p {margin: 0}</style></head><body>\n"
        '<div class="elementToProof"><br></div>\n'
        '<div id="Signature">\n<div>Best regards,</div>\n<div>John Smith</div>\n</div>\n'
        '<hr tabindex="-1" style="display:inline-block;width:98%">\n'
        '<div id="divRplyFwdMsg" dir="ltr"><b>From:</b> Anna Lee &lt;anna@example.com&gt;<br>'
        "<b>Sent:</b> Monday, March 3, 2025 10:00 AM<br><b>To:</b> John Smith<br>"
        "<b>Subject:</b> Update</div>\n"
        "<div>Hello John, here is the update.</div>\n"
        "</body></html>"
    )


@pytest.fixture
def outlook_reply_html():
    """Same reply after the user typed two lines above the signature."""
    return (
        "<html><head><style>p {margin: 0}</style></head><body>\n"
        '<div class="elementToProof">Hi Anna,</div>\n'
        '<div class="elementToProof">Thanks for the update.</div>\n'
        '<div id="Signature">\n<div>Best regards,</div>\n<div>John Smith</div>\n</div>\n'
        '<hr tabindex="-1" style="display:inline-block;width:98%">\n'
        '<div id="divRplyFwdMsg" dir="ltr"><b>From:</b> Anna Lee &lt;anna@example.com&gt;<br>'
        "<b>Sent:</b> Monday, March 3, 2025 10:00 AM<br><b>To:</b> John Smith<br>"
        "<b>Subject:</b> Update</div>\n"
        "<div>Hello John, here is the update.</div>\n"
        "</body></html>"
    )


@pytest.fixture
def gmail_reply_html():
    return (
        '<div dir="ltr">Sounds good, see you then.</div><br>'
        '<div class="gmail_quote"><div dir="ltr" class="gmail_attr">'
        "On Mon, Mar 3, 2025 at 10:00 AM Anna Lee &lt;anna@example.com&gt; wrote:<br></div>"
        '<blockquote class="gmail_quote" style="margin:0px">Can we meet Tuesday?</blockquote>'
        "</div>"
    )


@pytest.fixture
def separator_reply_html():
    return (
        "<div>Hello world</div>"
        '<hr tabindex="-1">'
        "<div>From: A Sent: B To: C Subject: D</div>"
    )


@pytest.fixture
def french_header_html():
    """Reply header with no client marker, only header text."""
    return (
        "<p>Bonjour</p>"
        "<div><p>De : Marie<br>Envoyé : lundi<br>À : Paul<br>Objet : Réunion</p>"
        "<p>Texte du message</p></div>"
    )


@pytest.fixture
def plain_draft_html():
    return "<div>Just a draft</div><div>with two lines</div>"


# ==========================================================================
# Provider settings
# ==========================================================================

@pytest.fixture
def provider_settings():
    return ProviderSettings.model_validate({
        "activeProvider": "openai",
        "providers": {
            "openai": {"apiKey": "sk-test", "endpoint": "https://api.openai.com/v1/", "model": "gpt-4o-mini"},
            "claude": {"apiKey": "ak-test", "endpoint": "https://api.anthropic.com", "model": "claude-3-5-sonnet-20241022"},
            "gemini": {"apiKey": "gk-test", "endpoint": "https://generativelanguage.googleapis.com", "model": "gemini-1.5-flash"},
            "custom": {"apiKey": "ck-test", "endpoint": "https://llm.internal.example/v1", "model": "local-model"},
        },
    })


# ==========================================================================
# HTTP stubs
# ==========================================================================

class FakeResponse:
    """Just enough of requests.Response for the provider adapters."""

    def __init__(self, status_code=200, payload=None, text=None):
        self.status_code = status_code
        self._payload = payload
        self.text = text if text is not None else json.dumps(payload)

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON object could be decoded")
        return self._payload


@pytest.fixture
def make_response():
    return FakeResponse


@pytest.fixture
def recorded_post(monkeypatch):
    """
    Replace requests.post inside the provider module.

    Returns a dict: set ``response`` (or ``error``) before the call, read
    ``calls`` afterwards.
    """
    state = {"calls": [], "response": FakeResponse(200, {}), "error": None}

    def fake_post(url, headers=None, json=None, params=None, **kwargs):
        state["calls"].append({"url": url, "headers": headers, "json": json, "params": params})
        if state["error"] is not None:
            raise state["error"]
        return state["response"]

    monkeypatch.setattr("draftsplice.completion.providers.requests.post", fake_post)
    return state


def openai_payload(content):
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


@pytest.fixture
def openai_completion():
    """Builds a chat-completions response body around *content*."""
    return openai_payload
