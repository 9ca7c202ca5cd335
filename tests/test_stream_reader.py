import json

import pytest

from ui.stream_reader import StreamReader, StreamState, extract_delta


def frame(content=None, role=None):
    delta = {}
    if role is not None:
        delta["role"] = role
    if content is not None:
        delta["content"] = content
    return "data: " + json.dumps({"choices": [{"delta": delta}]}, ensure_ascii=False) + "\n"


class Recorder:
    def __init__(self):
        self.deltas = []
        self.done_calls = 0

    def on_delta(self, text):
        self.deltas.append(text)

    def on_done(self):
        self.done_calls += 1

    def reader(self):
        return StreamReader(self.on_delta, self.on_done)


def run(body: bytes, chunk_size=None):
    rec = Recorder()
    reader = rec.reader()
    if chunk_size is None:
        reader.feed(body)
    else:
        for i in range(0, len(body), chunk_size):
            reader.feed(body[i:i + chunk_size])
    reader.close()
    return rec


STREAM = (
    ": keep-alive\n"
    + frame(role="assistant")
    + frame("Drink ")
    + frame("boiled water — ")
    + frame("डेंगू से बचें 🦟")
    + "\n"
    + frame("!")
    + "data: [DONE]\n"
).encode("utf-8")


@pytest.mark.parametrize("chunk_size", [1, 2, 3, 7, 64, len(STREAM)])
def test_chunk_boundaries_do_not_change_output(chunk_size):
    whole = run(STREAM)
    chunked = run(STREAM, chunk_size)

    assert chunked.deltas == whole.deltas
    assert "".join(whole.deltas) == "Drink boiled water — डेंगू से बचें 🦟!"
    assert chunked.done_calls == 1


def test_frame_without_content_is_skipped():
    rec = run((frame(role="assistant") + frame("") + "data: {\"choices\": []}\n" + frame("ok")).encode())
    assert rec.deltas == ["ok"]
    assert rec.done_calls == 1


def test_done_stops_everything_after_it():
    rec = Recorder()
    reader = rec.reader()
    reader.feed((frame("a") + "data: [DONE]\n" + frame("ignored")).encode())

    assert reader.state is StreamState.DONE
    assert rec.done_calls == 1

    reader.feed(frame("also ignored").encode())
    reader.close()
    assert rec.deltas == ["a"]
    assert rec.done_calls == 1


def test_payload_split_mid_json():
    rec = Recorder()
    reader = rec.reader()
    reader.feed(b'data: {"choi')
    assert rec.deltas == []
    reader.feed(b'ces":[{"delta":{"content":"Stay hydrated"}}]}\n')
    reader.close()
    assert rec.deltas == ["Stay hydrated"]


def test_unparseable_complete_line_waits_for_more_bytes():
    rec = Recorder()
    reader = rec.reader()
    reader.feed(b'data: {"choices":[{"delta":\n')
    reader.feed(frame("later").encode())
    # The broken line is retried first and still blocks the queue.
    assert rec.deltas == []

    reader.close()
    assert rec.deltas == ["later"]
    assert rec.done_calls == 1


def test_crlf_line_endings():
    body = frame("one").replace("\n", "\r\n") + frame("two").replace("\n", "\r\n") + "data: [DONE]\r\n"
    assert run(body.encode(), 5).deltas == ["one", "two"]


def test_non_data_lines_are_ignored():
    body = "event: message\nid: 4\n:comment\n" + frame("x") + "retry: 100\n"
    assert run(body.encode()).deltas == ["x"]


def test_close_flushes_unterminated_last_frame():
    body = (frame("first") + frame("last").rstrip("\n")).encode()
    rec = run(body, 4)
    assert rec.deltas == ["first", "last"]
    assert rec.done_calls == 1


def test_malformed_trailing_frame_is_dropped_silently():
    body = (frame("kept") + 'data: {"choices":[{"delta":{"cont').encode()
    rec = run(body)
    assert rec.deltas == ["kept"]
    assert rec.done_calls == 1


def test_multibyte_character_split_across_chunks():
    encoded = frame("é").encode("utf-8")
    split_at = encoded.index("é".encode("utf-8")) + 1
    rec = Recorder()
    reader = rec.reader()
    reader.feed(encoded[:split_at])
    reader.feed(encoded[split_at:])
    reader.close()
    assert rec.deltas == ["é"]


def test_duplicate_frames_each_emit_once():
    rec = run((frame("ha") + frame("ha")).encode())
    assert rec.deltas == ["ha", "ha"]


def test_empty_stream_still_completes():
    rec = Recorder()
    reader = rec.reader()
    assert reader.state is StreamState.IDLE
    reader.close()
    reader.close()
    assert rec.deltas == []
    assert rec.done_calls == 1


@pytest.mark.parametrize("payload", [
    None,
    [],
    {"choices": None},
    {"choices": [None]},
    {"choices": [{"delta": "text"}]},
    {"choices": [{"delta": {"content": 5}}]},
    {"choices": [{"finish_reason": "stop"}]},
])
def test_extract_delta_tolerates_odd_shapes(payload):
    assert extract_delta(payload) is None
