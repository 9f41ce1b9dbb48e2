"""
End-to-end tests: compose body → capture → completion → replaced body.

The HTTP layer is stubbed; everything else (parsing, segmentation,
cleaning, formatting, reassembly, file host) runs for real.
"""
import asyncio
import json

from draftsplice.models.compose_document import ComposeDocument
from draftsplice.segmentation.segmenter import segment
from draftsplice.session.assistant import DraftAssistant
from draftsplice.session.capture import ComposeSession
from draftsplice.session.host import FileMailHost
from draftsplice.storage.settings_store import JsonSettingsStore


class TestOutlookRoundTrip:
    """Full flow on an Outlook reply with signature and quoted thread."""

    def test_draft_is_replaced_and_history_kept(
        self,
        tmp_path,
        outlook_clean_html,
        outlook_reply_html,
        provider_settings,
        recorded_post,
        make_response,
        openai_completion,
    ):
        body_file = tmp_path / "body.html"
        body_file.write_text(outlook_clean_html, encoding="utf-8")
        settings_store = JsonSettingsStore(tmp_path / "settings.json")
        settings_store.set_provider_settings(provider_settings)

        host = FileMailHost(body_file)
        session = ComposeSession()
        assistant = DraftAssistant(host, session, settings_store.get_provider_settings)

        content = json.dumps({
            "subject": "Re: Update",
            "body": "Hi Anna,\n\n- numbers look good\n- see [[TABLE_1]]\n\nThanks again",
        })
        recorded_post["response"] = make_response(200, openai_completion(content))

        async def scenario():
            session.capture(await host.get_body())
            body_file.write_text(outlook_reply_html, encoding="utf-8")
            session.capture(await host.get_body())

            result = await assistant.process("Make it more detailed")
            await assistant.insert_subject(result)
            return await assistant.replace_body(result)

        written = asyncio.run(scenario())
        on_disk = body_file.read_text(encoding="utf-8")

        # Context sent to the model: draft without signature, then cleaned thread
        user_message = recorded_post["calls"][0]["json"]["messages"][1]["content"]
        assert "Hi Anna,\nThanks for the update.\n\n--- Previous Thread ---\nFrom:\nSent:" in user_message
        assert "Best regards" not in user_message.split("--- Previous Thread ---")[0]

        # Written body: formatted draft, then the original signature and thread
        assert written == on_disk
        assert on_disk.startswith('<p style="margin-top: 0; margin-bottom: 15px;">Hi Anna,</p>')
        assert '<ul style="margin-bottom: 15px;"><li>numbers look good</li><li>see [[TABLE_1]]</li></ul>' in on_disk
        assert on_disk.count('id="Signature"') == 1
        assert on_disk.count('id="divRplyFwdMsg"') == 1
        assert "Thanks for the update." not in on_disk
        assert host.subject == "Re: Update"

        # Re-segmenting the result finds the same history
        before = segment(ComposeDocument(outlook_reply_html))
        after = segment(ComposeDocument(on_disk))
        assert after.thread_html == before.thread_html
        assert after.signature_html == before.signature_html


class TestSeparatorScenario:

    def test_header_values_dropped_from_context(self, separator_reply_html):
        session = ComposeSession(signature_template="")
        session.capture(separator_reply_html)
        assert session.current_message_text == "Hello world"
        assert "From:\nSent:\nTo:\nSubject:" in session.thread_text

    def test_model_refusal_still_replaces_draft(
        self, separator_reply_html, provider_settings, recorded_post, make_response, openai_completion
    ):
        class _Host:
            def __init__(self):
                self.body = separator_reply_html
                self.subject = ""

            async def get_body(self):
                return self.body

            async def set_body(self, html):
                self.body = html

            async def set_subject(self, subject):
                self.subject = subject

        host = _Host()
        session = ComposeSession(signature_template="")
        session.capture(separator_reply_html)
        assistant = DraftAssistant(host, session, lambda: provider_settings)
        recorded_post["response"] = make_response(200, openai_completion("Sorry, I can't help"))

        async def scenario():
            result = await assistant.process("Rewrite")
            inserted = await assistant.insert_subject(result)
            await assistant.replace_body(result)
            return result, inserted

        result, inserted = asyncio.run(scenario())

        assert result.subject == ""
        assert not inserted
        assert host.body == (
            '<p style="margin-top: 0; margin-bottom: 15px;">Sorry, I can\'t help</p>'
            '<hr tabindex="-1"><div>From: A Sent: B To: C Subject: D</div>'
        )
