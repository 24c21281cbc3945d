from backend.app.stages.notifications import Notifier


def test_notifier_keeps_recent_items_and_forwards():
    received = []
    notifier = Notifier(max_items=2)
    notifier.subscribe(received.append)

    notifier.success("Request submitted successfully!")
    notifier.error("Failed to fetch history")
    notifier.error("Failed to process payment")

    assert [item.message for item in notifier.items] == ["Failed to fetch history", "Failed to process payment"]
    assert notifier.last.level == "error"
    assert len(received) == 3
    assert received[0].level == "success"


def test_notifier_clear():
    notifier = Notifier()
    notifier.error("Failed to fetch requests")
    assert notifier.errors() == ["Failed to fetch requests"]
    notifier.clear()
    assert notifier.items == []
    assert notifier.last is None
