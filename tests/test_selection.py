import pytest

from tablepos.errors import InvalidSelection
from tablepos.selection import Selection


def test_fresh_selection_picks_first_variant_and_required_options(catalog):
    pizza = catalog.find_item("margherita_pizza")
    selection = Selection.fresh(pizza)

    assert selection.variant_id == "small"
    assert selection.selected_options("crust") == {"classic"}
    assert selection.selected_options("toppings") == set()
    assert selection.quantity == 1


def test_fresh_combo_selection_prefills_first_candidate(catalog):
    combo = catalog.find_item("burger_combo")
    selection = Selection.fresh(combo)

    assert selection.combos == {0: ["french_fries"], 1: ["iced_tea"]}


def test_multi_select_double_toggle_restores_previous_set(catalog):
    salad = catalog.find_item("caesar_salad")
    selection = Selection.fresh(salad)
    selection.toggle_option("salad_extras", "no_croutons")
    before = selection.selected_options("salad_extras")

    selection.toggle_option("salad_extras", "extra_parmesan")
    selection.toggle_option("salad_extras", "extra_parmesan")

    assert selection.selected_options("salad_extras") == before == {"no_croutons"}


def test_single_select_replaces_previous_choice(catalog):
    salad = catalog.find_item("caesar_salad")
    selection = Selection.fresh(salad)

    selection.toggle_option("salad_protein", "chicken")
    selection.toggle_option("salad_protein", "shrimp")

    assert selection.selected_options("salad_protein") == {"shrimp"}


def test_single_select_reselect_keeps_choice(catalog):
    burger = catalog.find_item("classic_burger")
    selection = Selection.fresh(burger)

    selection.toggle_option("doneness", "medium_rare")

    assert selection.selected_options("doneness") == {"medium_rare"}


def test_option_from_another_group_is_rejected(catalog):
    salad = catalog.find_item("caesar_salad")
    selection = Selection.fresh(salad)

    with pytest.raises(InvalidSelection):
        selection.toggle_option("salad_protein", "no_croutons")
    assert selection.selected_options("salad_protein") == set()


def test_unknown_group_and_variant_are_rejected(catalog):
    pizza = catalog.find_item("margherita_pizza")
    selection = Selection.fresh(pizza)

    with pytest.raises(InvalidSelection):
        selection.toggle_option("sauces", "bbq")
    with pytest.raises(InvalidSelection):
        selection.choose_variant("family")
    assert selection.variant_id == "small"


def test_cycle_variant_wraps(catalog):
    pizza = catalog.find_item("margherita_pizza")
    selection = Selection.fresh(pizza)

    selection.cycle_variant(-1)
    assert selection.variant_id == "large"
    selection.cycle_variant(1)
    assert selection.variant_id == "small"


def test_combo_toggle_is_capped_at_select_count(catalog):
    platter = catalog.find_item("sharing_platter")
    selection = Selection.fresh(platter)

    selection.toggle_combo(0, "onion_rings")
    selection.toggle_combo(0, "side_salad")

    assert selection.combos[0] == ["french_fries", "onion_rings"]

    selection.toggle_combo(0, "french_fries")
    assert selection.combos[0] == ["onion_rings"]


def test_single_count_combo_slot_replaces(catalog):
    combo = catalog.find_item("burger_combo")
    selection = Selection.fresh(combo)

    selection.toggle_combo(1, "soda")

    assert selection.combos[1] == ["soda"]


def test_combo_candidate_outside_slot_is_rejected(catalog):
    combo = catalog.find_item("burger_combo")
    selection = Selection.fresh(combo)

    with pytest.raises(InvalidSelection):
        selection.toggle_combo(0, "iced_tea")
    with pytest.raises(InvalidSelection):
        selection.toggle_combo(5, "french_fries")


def test_quantity_is_clamped_at_one(catalog):
    selection = Selection.fresh(catalog.find_item("iced_tea"))

    selection.decrement()
    assert selection.quantity == 1

    selection.increment()
    selection.increment()
    assert selection.quantity == 3

    selection.set_quantity(0)
    assert selection.quantity == 1
