from ccstatus.transcript import read_context_tokens


def _event(timestamp: "str", input_tokens: "int", **extra: "object") -> "dict":
    event = {
        "timestamp": timestamp,
        "message": {
            "usage": {
                "input_tokens": input_tokens,
                "cache_read_input_tokens": 1000,
                "cache_creation_input_tokens": 200,
                "output_tokens": 999,
            }
        },
    }
    event.update(extra)
    return event


class TestReadContextTokens:
    def test_latest_usage_wins(self, write_transcript) -> "None":
        path = write_transcript(
            [
                _event("2025-10-18T10:00:00.000Z", 10),
                _event("2025-10-18T10:01:00.000Z", 20),
                _event("2025-10-18T10:02:00.000Z", 30),
            ]
        )
        assert read_context_tokens(path) == 30 + 1000 + 200

    def test_out_of_order_lines_use_timestamp(self, write_transcript) -> "None":
        path = write_transcript(
            [
                _event("2025-10-18T10:05:00.000Z", 50),
                _event("2025-10-18T10:01:00.000Z", 20),
            ]
        )
        assert read_context_tokens(path) == 50 + 1200

    def test_skips_sidechain_and_error_events(self, write_transcript) -> "None":
        path = write_transcript(
            [
                _event("2025-10-18T10:00:00.000Z", 10),
                _event("2025-10-18T10:01:00.000Z", 500, isSidechain=True),
                _event("2025-10-18T10:02:00.000Z", 700, isApiErrorMessage=True),
            ]
        )
        assert read_context_tokens(path) == 10 + 1200

    def test_skips_unparsable_and_usage_less_lines(self, write_transcript) -> "None":
        path = write_transcript(
            [
                "{broken json",
                {"type": "user", "timestamp": "2025-10-18T10:03:00.000Z"},
                {"message": {"usage": {"input_tokens": 5}}},
                _event("not-a-date", 900),
                _event("2025-10-18T10:00:00.000Z", 10),
            ]
        )
        assert read_context_tokens(path) == 10 + 1200

    def test_missing_cache_fields_count_as_zero(self, write_transcript) -> "None":
        path = write_transcript(
            [
                {
                    "timestamp": "2025-10-18T10:00:00Z",
                    "message": {"usage": {"input_tokens": 42}},
                }
            ]
        )
        assert read_context_tokens(path) == 42

    def test_missing_file_is_zero(self, tmp_path) -> "None":
        assert read_context_tokens(tmp_path / "nope.jsonl") == 0

    def test_empty_path_is_zero(self) -> "None":
        assert read_context_tokens("") == 0

    def test_no_usage_records_is_zero(self, write_transcript) -> "None":
        path = write_transcript([{"type": "summary"}])
        assert read_context_tokens(path) == 0
