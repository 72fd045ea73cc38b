#!/usr/bin/env python3
import unittest

from pydantic import ValidationError

from alertbridge.errors import MalformedPayload
from alertbridge.models import DiscordMessage, Embed, EmbedAuthor, EmbedField, decode_notification

from payloads import as_body, make_alert, make_notification


class TestDecodeNotification(unittest.TestCase):
    def test_decodes_full_payload(self):
        n = decode_notification(as_body(make_notification()))
        self.assertEqual(n.status, "firing")
        self.assertEqual(n.receiver, "discord")
        self.assertEqual(n.external_url, "http://alertmanager:9093")
        self.assertEqual(n.common_labels["prometheus"], "monitoring/k8s")
        self.assertEqual(len(n.alerts), 1)

        alert = n.alerts[0]
        self.assertEqual(alert.name, "TestAlert")
        self.assertEqual(alert.severity, "warning")
        self.assertEqual(alert.body, "test")
        self.assertEqual(alert.starts_at, "2025-10-08T14:33:30Z")
        self.assertEqual(alert.generator_url, "http://prometheus:9090/graph?g0.expr=up")

    def test_accepts_str_body(self):
        n = decode_notification(as_body(make_notification()).decode())
        self.assertEqual(n.receiver, "discord")

    def test_empty_body_is_malformed(self):
        for body in (b"", b"   ", None):
            with self.assertRaises(MalformedPayload):
                decode_notification(body)

    def test_invalid_json_is_malformed(self):
        with self.assertRaises(MalformedPayload):
            decode_notification(b"{not json")

    def test_non_object_root_is_malformed(self):
        with self.assertRaises(MalformedPayload):
            decode_notification(b"[1, 2, 3]")

    def test_missing_alerts_is_malformed(self):
        data = make_notification()
        del data["alerts"]
        with self.assertRaises(MalformedPayload) as ctx:
            decode_notification(as_body(data))
        self.assertIn("alerts", str(ctx.exception))

    def test_missing_status_is_malformed(self):
        data = make_notification()
        del data["status"]
        with self.assertRaises(MalformedPayload):
            decode_notification(as_body(data))

    def test_alerts_must_be_a_list(self):
        with self.assertRaises(MalformedPayload):
            decode_notification(as_body(make_notification(alerts={"a": 1})))

    def test_alert_entry_must_be_object(self):
        with self.assertRaises(MalformedPayload):
            decode_notification(as_body(make_notification(alerts=["oops"])))

    def test_labels_must_be_object(self):
        with self.assertRaises(MalformedPayload):
            decode_notification(as_body(make_notification(alerts=[make_alert(labels=["x"])])))

    def test_invalid_utf8_is_malformed(self):
        with self.assertRaises(MalformedPayload):
            decode_notification(b"\xff\xfe")

    def test_empty_alert_list_is_decoded(self):
        n = decode_notification(as_body(make_notification(alerts=[])))
        self.assertEqual(n.alerts, ())

    def test_unknown_fields_are_ignored(self):
        data = make_notification(somethingNew={"x": 1})
        data["alerts"][0]["values"] = {"A": 1.0}
        n = decode_notification(as_body(data))
        self.assertEqual(len(n.alerts), 1)

    def test_missing_optional_fields_default_to_empty(self):
        body = as_body({"status": "firing", "receiver": "r", "alerts": [{"status": "firing"}]})
        n = decode_notification(body)
        alert = n.alerts[0]
        self.assertEqual(dict(alert.labels), {})
        self.assertEqual(dict(alert.annotations), {})
        self.assertEqual(alert.name, "Unnamed alert")
        self.assertIsNone(alert.body)
        self.assertIsNone(alert.severity)
        self.assertEqual(n.external_url, "")

    def test_non_string_label_values_are_coerced(self):
        alert = make_alert(labels={"alertname": "X", "replicas": 3, "gone": None})
        n = decode_notification(as_body(make_notification(alerts=[alert])))
        self.assertEqual(n.alerts[0].labels["replicas"], "3")
        self.assertEqual(n.alerts[0].labels["gone"], "")

    def test_body_falls_back_to_summary_then_message(self):
        summary_only = make_alert(annotations={"summary": "disk almost full"})
        message_only = make_alert(annotations={"message": "pod crashlooping"})
        blank_description = make_alert(annotations={"description": "  ", "summary": "fallback"})
        n = decode_notification(as_body(make_notification(
            alerts=[summary_only, message_only, blank_description])))
        self.assertEqual([a.body for a in n.alerts], ["disk almost full", "pod crashlooping", "fallback"])

    def test_alerts_are_immutable(self):
        n = decode_notification(as_body(make_notification()))
        with self.assertRaises(ValidationError):
            n.alerts[0].status = "resolved"
        with self.assertRaises(TypeError):
            n.alerts[0].labels["alertname"] = "changed"

    def test_deeply_nested_json_is_malformed(self):
        body = b"[" * 100000 + b"]" * 100000
        with self.assertRaises(MalformedPayload):
            decode_notification(body)

    def test_deeply_nested_field_is_malformed(self):
        body = b'{"status": "firing", "receiver": "r", "alerts": ' + b"[" * 100000 + b"]" * 100000 + b"}"
        with self.assertRaises(MalformedPayload):
            decode_notification(body)

    def test_truncated_alerts_boolean_is_not_a_count(self):
        n = decode_notification(as_body(make_notification(truncatedAlerts=True)))
        self.assertEqual(n.truncated_alerts, 0)

    def test_negative_truncated_alerts_is_malformed(self):
        with self.assertRaises(MalformedPayload):
            decode_notification(as_body(make_notification(truncatedAlerts=-3)))

    def test_null_optional_fields_default_to_empty(self):
        alert = make_alert(labels=None, annotations=None, generatorURL=None)
        n = decode_notification(as_body(make_notification(alerts=[alert], externalURL=None, commonLabels=None)))
        self.assertEqual(dict(n.alerts[0].labels), {})
        self.assertEqual(n.alerts[0].generator_url, "")
        self.assertEqual(n.external_url, "")
        self.assertEqual(dict(n.common_labels), {})

    def test_status_is_normalized(self):
        n = decode_notification(as_body(make_notification(alerts=[make_alert(status=" FIRING ")])))
        self.assertEqual(n.alerts[0].status, "firing")

    def test_firing_and_resolved_views(self):
        alerts = [make_alert(status="firing"), make_alert(status="resolved"), make_alert(status="firing")]
        n = decode_notification(as_body(make_notification(alerts=alerts)))
        self.assertEqual(len(n.firing), 2)
        self.assertEqual(len(n.resolved), 1)


class TestDiscordMessage(unittest.TestCase):
    def test_to_dict_omits_empty_parts(self):
        message = DiscordMessage(embeds=[Embed(title="t", description="d", color=1)])
        self.assertEqual(message.to_dict(), {
            "embeds": [{"title": "t", "description": "d", "color": 1}],
        })

    def test_to_dict_full(self):
        embed = Embed(
            title="t",
            description="d",
            color=2,
            fields=[EmbedField("Severity", "CRITICAL", inline=True)],
            url="http://prometheus",
            author=EmbedAuthor("k8s", "http://alertmanager"),
            footer="footer",
        )
        data = DiscordMessage(content="hi", embeds=[embed], username="bot").to_dict()
        self.assertEqual(data["content"], "hi")
        self.assertEqual(data["username"], "bot")
        self.assertEqual(data["embeds"][0]["fields"], [{"name": "Severity", "value": "CRITICAL", "inline": True}])
        self.assertEqual(data["embeds"][0]["author"], {"name": "k8s", "url": "http://alertmanager"})
        self.assertEqual(data["embeds"][0]["footer"], {"text": "footer"})
        self.assertEqual(data["embeds"][0]["url"], "http://prometheus")


if __name__ == '__main__':
    unittest.main()
