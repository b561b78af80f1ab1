import pytest

from core.errors import BusyRejection, UserInputError
from linklist.sl_ctrl import LinkedListController
from linklist.sl_model import LinkedListModel


@pytest.fixture
def make_ctrl(make_global, scheduler, qtbot):
    def _make(**overrides):
        ctrl = LinkedListController(make_global(**overrides), scheduler=scheduler)
        qtbot.addWidget(ctrl)
        return ctrl

    return _make


@pytest.fixture
def ctrl(make_ctrl):
    return make_ctrl()


def seed(ctrl, *values):
    ctrl.model.create_from_iterable(values)
    ctrl.view.render(ctrl.model.snapshot(), {})


def list_values(ctrl):
    return ctrl.model.values()


def fills(ctrl):
    return [ctrl.view.node_items[nid].fill_color for nid in ctrl.view.order]


def test_model_links_follow_insert_order():
    model = LinkedListModel()
    model.create_from_iterable([1, 2, 3])
    model.add_first(0)
    model.add_last(4)
    model.insert(2, 9)
    assert model.values() == [0, 1, 9, 2, 3, 4]
    assert len(model) == 6


def test_model_removals_relink_neighbours():
    model = LinkedListModel()
    model.create_from_iterable("abcd")
    assert model.remove_first()["value"] == "a"
    assert model.remove_last()["value"] == "d"
    assert model.delete(1)["value"] == "c"
    assert model.values() == ["b"]
    assert model.nodes[model.head]["next"] is None


def test_model_out_of_range():
    model = LinkedListModel()
    with pytest.raises(IndexError):
        model.remove_first()
    with pytest.raises(IndexError):
        model.insert(1, "x")


def test_model_index_of_finds_first_match():
    model = LinkedListModel()
    model.create_from_iterable([5, 7, 5])
    assert model.index_of(5) == 0
    assert model.index_of(8) == -1


def test_create_builds_nodes_and_reports(ctrl, qtbot, toasts):
    log = toasts(ctrl)
    ctrl.create(["3", "1", "4"])
    assert ctrl.gate.holder == "animation"
    qtbot.waitUntil(lambda: not ctrl.gate.is_held, timeout=5000)

    assert list_values(ctrl) == [3, 1, 4]
    assert len(ctrl.view.node_items) == 3
    assert len(ctrl.view.arrow_items) == 2
    assert ctrl.view.node_items[ctrl.view.order[-1]].is_tail
    assert log == [("Linked list built with 3 nodes.", "success")]


def test_create_with_no_values_keeps_the_list(ctrl, toasts):
    seed(ctrl, 1, 2)
    log = toasts(ctrl)
    assert ctrl._dispatch(ctrl.create, []) is None
    assert list_values(ctrl) == [1, 2]
    assert log == [("Please enter at least one value.", "error")]


def test_add_first_highlights_new_head(ctrl, scheduler, toasts):
    seed(ctrl, 2, 3)
    log = toasts(ctrl)
    assert ctrl.add_first("1") == 1
    assert list_values(ctrl) == [1, 2, 3]
    assert fills(ctrl)[0] == ctrl.view.token_color("inserted")

    scheduler.run_all()
    assert scheduler.delays == [600]
    assert log == [("Added 1 to the front", "success")]
    assert fills(ctrl)[0] == ctrl.view.token_color("default")


def test_add_last_walks_every_node_first(ctrl, scheduler, toasts):
    seed(ctrl, "a", "b", "c")
    log = toasts(ctrl)
    ctrl.add_last("d")
    assert len(ctrl.view.node_items) == 3

    scheduler.run_all()
    assert scheduler.delays == [400, 400, 400, 600]
    assert list_values(ctrl) == ["a", "b", "c", "d"]
    assert len(ctrl.view.arrow_items) == 3
    assert log == [("Added d to the end", "success")]


def test_add_last_on_empty_list_skips_the_walk(ctrl, scheduler):
    ctrl.add_last(5)
    scheduler.run_all()
    assert scheduler.delays == [600]
    assert list_values(ctrl) == [5]


def test_insert_walks_to_the_index(ctrl, scheduler, toasts):
    seed(ctrl, 1, 2, 3)
    log = toasts(ctrl)
    ctrl.insert(2, 9)
    scheduler.run_all()
    assert scheduler.delays == [400, 400, 600]
    assert list_values(ctrl) == [1, 2, 9, 3]
    assert log == [("Inserted 9 at index 2", "success")]


def test_insert_rejects_bad_input(make_ctrl):
    ctrl = make_ctrl(linked_list={"max_size": 2})
    seed(ctrl, 1, 2)
    with pytest.raises(UserInputError, match=r"List is full \(max 2 nodes\)!"):
        ctrl.add_first(0)
    ctrl.model.clear()
    with pytest.raises(UserInputError, match="Index must be between 0 and 0."):
        ctrl.insert(1, 7)
    with pytest.raises(UserInputError, match="Please enter a value."):
        ctrl.add_last(" ")


@pytest.mark.parametrize(
    "operation, args",
    [("remove_first", ()), ("remove_last", ()), ("remove", (0,)), ("search", (1,))],
)
def test_empty_list_is_reported(ctrl, operation, args):
    with pytest.raises(UserInputError, match="The list is empty."):
        getattr(ctrl, operation)(*args)


def test_remove_first_shows_red_head_before_unlinking(ctrl, scheduler, toasts):
    seed(ctrl, 1, 2, 3)
    log = toasts(ctrl)
    assert ctrl.remove_first() == 1
    assert list_values(ctrl) == [2, 3]
    assert len(ctrl.view.node_items) == 3
    assert fills(ctrl)[0] == ctrl.view.token_color("delete")

    scheduler.run_all()
    assert scheduler.delays == [600]
    assert len(ctrl.view.node_items) == 2
    assert log == [("Removed 1 from the front", "success")]


def test_remove_last_lights_the_new_tail(ctrl, scheduler, toasts):
    seed(ctrl, 1, 2, 3, 4)
    log = toasts(ctrl)
    assert ctrl.remove_last() == 4
    scheduler.run_next()
    scheduler.run_next()
    assert scheduler.delays == [400, 400, 600]
    visit, delete = ctrl.view.token_color("visit"), ctrl.view.token_color("delete")
    assert fills(ctrl)[2:] == [visit, delete]

    scheduler.run_all()
    assert list_values(ctrl) == [1, 2, 3]
    assert ctrl.view.node_items[ctrl.view.order[-1]].is_tail
    assert log == [("Removed 4 from the end", "success")]


def test_remove_last_of_single_node(ctrl, scheduler):
    seed(ctrl, 7)
    assert ctrl.remove_last() == 7
    scheduler.run_all()
    assert scheduler.delays == [600]
    assert ctrl.view.node_items == {}
    assert ctrl.view.empty_label.isVisible()


def test_remove_by_index_from_node_menu(ctrl, scheduler):
    seed(ctrl, "a", "b", "c")
    ctrl.view.deleteRequested.emit(ctrl.view.order[1])
    scheduler.run_all()
    assert list_values(ctrl) == ["a", "c"]


def test_search_finds_value(ctrl, scheduler, toasts):
    seed(ctrl, 5, 8, 13)
    log = toasts(ctrl)
    assert ctrl.search("8") == 1
    assert fills(ctrl)[0] == ctrl.view.token_color("visit")
    with pytest.raises(BusyRejection):
        ctrl.add_first(1)
    scheduler.run_next()
    assert fills(ctrl)[1] == ctrl.view.token_color("found")
    scheduler.run_all()
    assert scheduler.delays == [400, 1000]
    assert log == [("Found 8!", "success")]


def test_search_miss_walks_whole_list(ctrl, scheduler, toasts):
    seed(ctrl, 5, 8, 13)
    log = toasts(ctrl)
    assert ctrl.search(42) == -1
    scheduler.run_all()
    assert scheduler.delays == [400, 400, 400]
    assert log == [("42 not found.", "error")]
    assert list_values(ctrl) == [5, 8, 13]


def test_clear_resets_view(ctrl):
    seed(ctrl, 1, 2)
    ctrl.clear()
    assert len(ctrl.model) == 0
    assert ctrl.view.node_items == {}
    assert ctrl.view.arrow_items == {}
    assert not ctrl.remove_first_btn.isEnabled()


def test_index_spins_track_length(ctrl, scheduler):
    seed(ctrl, 1, 2, 3)
    ctrl.add_last(4)
    scheduler.run_all()
    assert ctrl.insert_index_spin.maximum() == 4
    assert ctrl.delete_index_spin.maximum() == 3
