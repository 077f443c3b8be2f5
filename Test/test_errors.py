from routes.errors import LOGGED_VALUE_MAX_CHARS, summarize_request_body


def test_top_level_image_is_abbreviated():
    summary = summarize_request_body({"image": "A" * 5000})

    assert summary["image"].startswith("A" * LOGGED_VALUE_MAX_CHARS + "...")
    assert summary["image"].endswith("(5000 characters)")


def test_nested_chat_content_is_abbreviated():
    body = {
        "messages": [
            {"role": "user", "content": "short question"},
            {"role": "assistant", "content": "B" * 3000},
        ],
        "diagnosis": "C" * 1000,
    }

    summary = summarize_request_body(body)

    assert summary["messages"][0] == {"role": "user", "content": "short question"}
    assert summary["messages"][1]["content"].endswith("(3000 characters)")
    assert len(summary["messages"][1]["content"]) < 300
    assert summary["diagnosis"].endswith("(1000 characters)")


def test_original_body_is_left_untouched():
    body = {"messages": [{"role": "user", "content": "D" * 500}]}

    summarize_request_body(body)

    assert body["messages"][0]["content"] == "D" * 500
