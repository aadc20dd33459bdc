import io
import json
import unittest
from contextlib import redirect_stdout
from unittest import mock

import lambda_function
from chrono_tools.invocation_log import get_logger


def _invoke(event):
    with redirect_stdout(io.StringIO()):
        return lambda_function.lambda_handler(event, None)


class TestDispatch(unittest.TestCase):
    def test_schemas_match_handlers(self):
        names = [schema["name"] for schema in lambda_function.FUNCTION_SCHEMAS]
        self.assertEqual(names, list(lambda_function.HANDLERS))

    def test_plain_event(self):
        result = _invoke({"function": "format_duration", "seconds": 93784, "style": "compact"})
        self.assertTrue(result["success"])
        self.assertEqual(result["function"], "format_duration")
        self.assertEqual(result["result"]["formatted"], "1d 2h 3m 4s")

    def test_op_alias_and_string_numbers(self):
        result = _invoke({"op": "ADD_TIME", "timestamp": "2025-08-11", "duration": "-2", "unit": "weeks"})
        self.assertTrue(result["success"])
        self.assertEqual(result["result"]["result"], "2025-07-28")

    def test_bedrock_envelope(self):
        event = {
            "messageVersion": "1.0",
            "actionGroup": "TimeTools",
            "function": "parse_timestamp",
            "parameters": [
                {"name": "timestamp", "type": "string", "value": "2025-08-12T15:00:00Z"},
                {"name": "target_timezone", "type": "string", "value": "Asia/Tokyo"},
            ],
            "sessionAttributes": {"user": "x"},
        }
        response = _invoke(event)
        self.assertEqual(response["messageVersion"], "1.0")
        self.assertEqual(response["response"]["actionGroup"], "TimeTools")
        self.assertEqual(response["response"]["function"], "parse_timestamp")
        self.assertEqual(response["sessionAttributes"], {"user": "x"})
        body = json.loads(response["response"]["functionResponse"]["responseBody"]["TEXT"]["body"])
        self.assertTrue(body["success"])
        self.assertEqual(body["result"]["iso"], "2025-08-13T00:00:00+09:00")

    def test_fuzzy_flag_from_string(self):
        result = _invoke({
            "function": "time_difference",
            "parameters": [
                {"name": "timestamp1", "value": "-2h"},
                {"name": "timestamp2", "value": "0"},
                {"name": "enable_fuzzy_parsing", "value": "true"},
            ],
        })
        self.assertTrue(result["success"], result)
        self.assertAlmostEqual(result["result"]["seconds"], 7200, delta=1)


class TestErrors(unittest.TestCase):
    def test_unknown_function(self):
        result = _invoke({"function": "teleport"})
        self.assertFalse(result["success"])
        self.assertIn("unsupported function 'teleport'", result["error"])

    def test_missing_required_parameter(self):
        result = _invoke({"function": "add_time", "timestamp": "2025-08-11", "unit": "days"})
        self.assertFalse(result["success"])
        self.assertEqual(result["error"], "missing required parameter 'duration' for add_time")

    def test_bad_boolean(self):
        result = _invoke({"function": "time_since", "timestamp": "2025-08-11", "enable_fuzzy_parsing": "maybe"})
        self.assertFalse(result["success"])
        self.assertIn("enable_fuzzy_parsing", result["error"])

    def test_invalid_timezone_is_reported(self):
        result = _invoke({"function": "current_datetime", "timezone": "Mars/Olympus"})
        self.assertFalse(result["success"])
        self.assertIn("invalid timezone: 'Mars/Olympus'", result["error"])

    def test_unparseable_timestamp(self):
        result = _invoke({"function": "time_since", "timestamp": "xyzzy"})
        self.assertFalse(result["success"])
        self.assertTrue(result["error"].startswith("invalid timestamp format: 'xyzzy'"))

    def test_logger_unbound_after_call(self):
        _invoke({"function": "teleport"})
        self.assertIsNone(get_logger())


class TestConfiguration(unittest.TestCase):
    def test_env_bool(self):
        with mock.patch.dict("os.environ", {"X_FLAG": "Yes"}):
            self.assertTrue(lambda_function._env_bool("X_FLAG", False))
        with mock.patch.dict("os.environ", {"X_FLAG": "off"}):
            self.assertFalse(lambda_function._env_bool("X_FLAG", True))
        with mock.patch.dict("os.environ", {"X_FLAG": "bogus"}):
            self.assertTrue(lambda_function._env_bool("X_FLAG", True))

    def test_debug_log_attaches_entries(self):
        with mock.patch.object(lambda_function, "DEBUG_LOG", True):
            result = _invoke({"function": "format_duration", "seconds": 5})
        self.assertTrue(result["success"])
        messages = [entry["message"] for entry in result["debugLog"]]
        self.assertIn("Routing to function", messages)
        self.assertIn("Function completed", result["debugLogText"])

    def test_debug_log_off_by_default(self):
        with mock.patch.object(lambda_function, "DEBUG_LOG", False):
            result = _invoke({"function": "format_duration", "seconds": 5})
        self.assertNotIn("debugLog", result)

    def test_default_timezone(self):
        with mock.patch.object(lambda_function, "DEFAULT_TIMEZONE", "Asia/Tokyo"):
            result = _invoke({"function": "current_datetime"})
        self.assertEqual(result["result"]["timezone"], "Asia/Tokyo")

    def test_autodetect_timezone(self):
        with mock.patch.object(lambda_function, "detect_system_timezone", return_value="Europe/Zurich"):
            result = _invoke({"function": "current_datetime", "autodetect_and_use_user_timezone": True})
        self.assertEqual(result["result"]["timezone"], "Europe/Zurich")

    def test_explicit_timezone_beats_autodetect(self):
        with mock.patch.object(lambda_function, "detect_system_timezone", return_value="Europe/Zurich"):
            result = _invoke({
                "function": "current_datetime",
                "timezone": "UTC",
                "autodetect_and_use_user_timezone": True,
            })
        self.assertEqual(result["result"]["timezone"], "UTC")

    def test_fuzzy_default(self):
        event = {"function": "parse_timestamp", "timestamp": "tomorrow at 3pm"}
        with mock.patch.object(lambda_function, "FUZZY_DEFAULT", False):
            self.assertFalse(_invoke(event)["success"])
        with mock.patch.object(lambda_function, "FUZZY_DEFAULT", True):
            self.assertTrue(_invoke(event)["success"])


if __name__ == "__main__":
    unittest.main()
