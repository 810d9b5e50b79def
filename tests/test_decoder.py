"""Tests for streamchat.decoder."""

import pytest

from streamchat.decoder import StreamDecoder, decode_text
from streamchat.errors import StreamError
from streamchat.events import EndOfStream, ErrorSignal, TextEvent
from streamchat.segments import (
    EnterCodeBlock,
    EnterThinking,
    ExitCodeBlock,
    ExitThinking,
    RenderSegment,
    code,
    plain,
    thinking,
)


def coalesce(segments):
    """Merge adjacent text segments of the same kind and language."""
    merged = []
    for seg in segments:
        prev = merged[-1] if merged else None
        if (
            isinstance(seg, RenderSegment)
            and isinstance(prev, RenderSegment)
            and prev.kind == seg.kind
            and prev.language == seg.language
        ):
            merged[-1] = RenderSegment(seg.kind, prev.text + seg.text, seg.language)
        else:
            merged.append(seg)
    return merged


def segment_text(segments):
    return "".join(s.text for s in segments if isinstance(s, RenderSegment))


def _decode_chunks(chunks, newline_token="<|newline|>"):
    decoder = StreamDecoder(newline_token)
    out = []
    for chunk in chunks:
        out.extend(decoder.feed(TextEvent(chunk)))
    out.extend(decoder.feed(EndOfStream()))
    return out


def _split(raw, size):
    return [raw[i:i + size] for i in range(0, len(raw), size)]


def test_split_thinking_markers():
    segments = _decode_chunks(["He", "llo <|thi", "nking|>th", "ink</|thinking|>world"])
    assert coalesce(segments) == [
        plain("Hello "),
        EnterThinking(),
        thinking("think"),
        ExitThinking(),
        plain("world"),
    ]


def test_no_marker_text_leaks():
    segments = _decode_chunks(["He", "llo <|thi", "nking|>th", "ink</|thinking|>world"])
    for seg in segments:
        if hasattr(seg, "text"):
            assert "|" not in seg.text


def test_text_is_emitted_before_stream_end():
    decoder = StreamDecoder()
    assert decoder.feed(TextEvent("Hello wor")) == [plain("Hello wor")]


def test_partial_marker_is_held_back():
    decoder = StreamDecoder()
    assert decoder.feed(TextEvent("see <|thin")) == [plain("see ")]


SAMPLES = [
    "Hello <|thinking|>plan<|newline|>more</|thinking|>world",
    "intro<|newline|>```python<|newline|>x = 1<|newline|>```<|newline|>done",
    "  ```<|newline|>a<|newline|>  ```",
    "a < b <| c </ d <|newline",
    "<|thinking|>```js<|newline|>not code</|thinking|>``",
    "```py<|newline|>a<|newline|><|thinking|>hm</|thinking|>b",
    "</|thinking|>stray<|newline|>  text",
]


@pytest.mark.parametrize("raw", SAMPLES)
def test_chunking_does_not_change_decoded_content(raw):
    whole = _decode_chunks([raw])
    for size in (1, 2, 3, 5, 8):
        chunked = _decode_chunks(_split(raw, size))
        assert segment_text(chunked) == segment_text(whole)
        assert coalesce(chunked) == coalesce(whole)


def test_unterminated_thinking_closed_on_finish():
    decoder = StreamDecoder()
    decoder.feed(TextEvent("<|thinking|>pondering"))
    tail = decoder.feed(EndOfStream())
    assert tail[-1] == ExitThinking()
    assert decoder.closed


def test_unterminated_code_block_closed_on_finish():
    segments = _decode_chunks(["```python\nx = 1\n"])
    assert segments[-1] == ExitCodeBlock()


def test_code_fence_with_language():
    raw = "```python<|newline|>print('hi')<|newline|>x = 1<|newline|>```<|newline|>"
    segments = coalesce(_decode_chunks([raw]))
    assert segments == [
        EnterCodeBlock("python"),
        code("print('hi')\nx = 1\n", "python"),
        ExitCodeBlock(),
    ]
    assert sum(isinstance(s, EnterCodeBlock) for s in segments) == 1
    assert sum(isinstance(s, ExitCodeBlock) for s in segments) == 1


def test_indented_fence():
    segments = coalesce(decode_text("   ```python\nx\n   ```\n"))
    assert segments == [EnterCodeBlock("python"), code("x\n", "python"), ExitCodeBlock()]


def test_fence_label_is_trimmed():
    segments = decode_text("```  rust  \nfn main() {}\n```")
    assert segments[0] == EnterCodeBlock("rust")


def test_empty_fence_label_passes_through():
    segments = coalesce(decode_text("```\nhi\n```"))
    assert segments == [EnterCodeBlock(""), code("hi\n", ""), ExitCodeBlock()]


def test_closing_fence_remainder_is_discarded():
    segments = coalesce(decode_text("```sh\nls\n``` trailing\nafter"))
    assert segments == [EnterCodeBlock("sh"), code("ls\n", "sh"), ExitCodeBlock(), plain("after")]


def test_leading_whitespace_kept_outside_fences():
    assert coalesce(decode_text("  indented\n\tnext")) == [plain("  indented\n\tnext")]


def test_fence_must_start_line():
    assert coalesce(decode_text("use ``` for code")) == [plain("use ``` for code")]


def test_fence_inside_thinking_is_literal():
    segments = coalesce(decode_text("<|thinking|>\n```py\nx\n</|thinking|>after"))
    assert segments == [
        EnterThinking(),
        thinking("\n```py\nx\n"),
        ExitThinking(),
        plain("after"),
    ]


def test_text_after_thinking_close_is_fence_eligible():
    segments = coalesce(decode_text("<|thinking|>hm</|thinking|>```js\nf()\n```"))
    assert segments == [
        EnterThinking(),
        thinking("hm"),
        ExitThinking(),
        EnterCodeBlock("js"),
        code("f()\n", "js"),
        ExitCodeBlock(),
    ]


def test_thinking_open_closes_code_block():
    segments = coalesce(decode_text("```py\na = 1\n<|thinking|>hm</|thinking|>b"))
    assert segments == [
        EnterCodeBlock("py"),
        code("a = 1\n", "py"),
        ExitCodeBlock(),
        EnterThinking(),
        thinking("hm"),
        ExitThinking(),
        plain("b"),
    ]


def test_nested_thinking_open_is_literal():
    segments = coalesce(decode_text("<|thinking|>a<|thinking|>b</|thinking|>"))
    assert segments == [EnterThinking(), thinking("a<|thinking|>b"), ExitThinking()]


def test_stray_thinking_close_is_dropped():
    assert coalesce(decode_text("a</|thinking|>b")) == [plain("ab")]


def test_partial_marker_flushed_as_text():
    assert coalesce(_decode_chunks(["tail <|think"])) == [plain("tail <|think")]


def test_partial_fence_flushed_as_text():
    assert coalesce(_decode_chunks(["line\n``"])) == [plain("line\n``")]


def test_sentinel_decoded_to_newline():
    assert coalesce(decode_text("a<|newline|>b")) == [plain("a\nb")]


def test_sentinel_split_across_fragments():
    assert coalesce(_decode_chunks(["a<|new", "line|>b"])) == [plain("a\nb")]


def test_partial_sentinel_flushed_as_text():
    assert coalesce(_decode_chunks(["a<|newl"])) == [plain("a<|newl")]


def test_custom_newline_token():
    assert coalesce(_decode_chunks(["a\\", "nb"], newline_token="\\n")) == [plain("a\nb")]


def test_error_signal_aborts():
    decoder = StreamDecoder()
    decoder.feed(TextEvent("partial <|thin"))
    with pytest.raises(StreamError) as exc:
        decoder.feed(ErrorSignal("model crashed"))
    assert exc.value.message == "model crashed"
    assert decoder.feed(TextEvent("more")) == []
    assert decoder.finish() == []


def test_feed_after_finish_is_ignored():
    decoder = StreamDecoder()
    decoder.feed(EndOfStream())
    assert decoder.feed(TextEvent("late")) == []


def test_empty_input():
    assert decode_text("") == []


def test_region_flags():
    decoder = StreamDecoder()
    decoder.feed(TextEvent("<|thinking|>x"))
    assert decoder.inside_thinking
    assert not decoder.inside_code_block
    decoder.feed(TextEvent("</|thinking|>\n```py\n"))
    assert decoder.inside_code_block
    assert not decoder.inside_thinking
