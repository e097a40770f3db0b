from option_handoff.autofill import apply_autofill, fill_text
from option_handoff.fields import FieldDescriptor, FieldKind
from option_handoff.inputs import InputStore
from option_handoff.notify import CollectingNotifier


def _fields():
    return [
        FieldDescriptor(key="qty", name="qty", kind=FieldKind.NUMBER),
        FieldDescriptor(key="notes", name="Notes", kind=FieldKind.LONG_TEXT),
    ]


def test_apply_autofill_fills_best_field_and_keeps_others():
    store = InputStore({"qty": "3", "notes": ""})
    notifier = CollectingNotifier()
    result = apply_autofill(store, _fields(), "lang=en&autoFillText=earlier%0ABeta%20%26%20Co", notifier)
    assert result.applied is True
    assert result.target_key == "notes"
    assert result.text == "earlier\nBeta & Co"
    assert store.get_current() == {"qty": "3", "notes": "earlier\nBeta & Co"}
    assert result.inputs == store.get_current()
    assert notifier.notices == []


def test_apply_autofill_decode_failure_leaves_inputs_alone():
    store = InputStore({"qty": "3", "notes": "mine"})
    notifier = CollectingNotifier()
    result = apply_autofill(store, _fields(), "autoFillText=%E4%BD", notifier)
    assert result.applied is False
    assert result.target_key is None
    assert store.get_current() == {"qty": "3", "notes": "mine"}
    assert notifier.has_errors()
    assert notifier.notices[0]["type"] == "error"


def test_apply_autofill_without_parameter_is_quiet():
    store = InputStore({"notes": "mine"})
    notifier = CollectingNotifier()
    result = apply_autofill(store, _fields(), "other=1", notifier)
    assert result.applied is False
    assert store.get_current() == {"notes": "mine"}
    assert notifier.notices == []


def test_apply_autofill_empty_value_keeps_typed_text():
    for query in ("autoFillText=", "autoFillText", "autoFillText=&lang=en"):
        store = InputStore({"notes": "typed by user"})
        notifier = CollectingNotifier()
        result = apply_autofill(store, _fields(), query, notifier)
        assert result.applied is False
        assert result.target_key is None
        assert store.get_current() == {"notes": "typed by user"}
        assert notifier.notices == []


def test_empty_form_is_a_no_op_without_notice():
    before = {"b": 2, "a": 1}
    store = InputStore(before)
    notifier = CollectingNotifier()
    result = apply_autofill(store, [], "autoFillText=hello", notifier)
    assert result.applied is False
    assert result.text == "hello"
    assert store.get_current() == before
    assert list(store.get_current()) == ["b", "a"]
    assert notifier.notices == []


def test_fill_text_notifies_ui_listener():
    store = InputStore({})
    seen = []
    store.subscribe(seen.append)
    fill_text(store, [FieldDescriptor(key="q", name="Query", kind=FieldKind.SHORT_TEXT)], "x")
    assert seen == [{"q": "x"}]
