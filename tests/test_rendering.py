from conftest import make_line
from tablepos.models import ItemStatus, PriorityTag
from tablepos.rendering import format_kitchen_ticket, format_line_label


def test_kitchen_ticket_leads_with_priority_tag():
    line = make_line(
        "a",
        "12.99",
        2,
        name="Margherita Pizza",
        status=ItemStatus.PREPARING,
        priority=PriorityTag.FIRE,
        modifiers=("Large",),
        notes="cut in 8",
    )

    assert format_kitchen_ticket(7, line).plain == (
        ' FIRE  T7 2x Margherita Pizza  PREPARING \n      [Large]\n      "cut in 8"'
    )


def test_untagged_kitchen_ticket():
    line = make_line("b", name="Iced Tea")

    assert format_kitchen_ticket(None, line).plain == "-- 1x Iced Tea  PENDING "


def test_line_label_shows_status_only_once_submitted():
    line = make_line("c", "2.99", 2, name="Iced Tea", priority=PriorityTag.HOLD)

    assert format_line_label(line).plain == "2x Iced Tea  $5.98  HOLD "
    assert format_line_label(line, submitted=True).plain == "2x Iced Tea  $5.98  PENDING   HOLD "
