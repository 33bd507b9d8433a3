"""Editable static menu, floor and staff configuration."""

from __future__ import annotations

CATEGORY_ORDER: list[str] = ["appetizers", "main", "sides", "drinks", "desserts", "combos"]

MENU_ROWS: list[dict[str, object]] = [
    {
        "id": "caesar_salad",
        "name": "Caesar Salad",
        "price": "8.99",
        "category": "appetizers",
        "description": "Romaine lettuce with Caesar dressing, croutons and parmesan",
        "modifiers": [
            {
                "id": "salad_protein",
                "name": "Add Protein",
                "required": False,
                "multi_select": False,
                "options": [
                    {"id": "chicken", "name": "Grilled Chicken", "price": "3.50"},
                    {"id": "shrimp", "name": "Shrimp", "price": "4.50"},
                ],
            },
            {
                "id": "salad_extras",
                "name": "Extras",
                "required": False,
                "multi_select": True,
                "options": [
                    {"id": "no_croutons", "name": "No Croutons", "price": "0"},
                    {"id": "extra_parmesan", "name": "Extra Parmesan", "price": "1.00"},
                    {"id": "dressing_side", "name": "Dressing on Side", "price": "0"},
                ],
            },
        ],
    },
    {
        "id": "garlic_bread",
        "name": "Garlic Bread",
        "price": "5.49",
        "category": "appetizers",
        "description": "Toasted baguette with garlic butter",
        "offer": {"type": "bogo", "value": "100", "description": "Buy one get one"},
    },
    {
        "id": "grilled_salmon",
        "name": "Grilled Salmon",
        "price": "18.99",
        "category": "main",
        "description": "Atlantic salmon fillet with seasonal vegetables",
        "offer": {"type": "discount", "value": "10", "description": "10% off"},
        "modifiers": [
            {
                "id": "salmon_side",
                "name": "Side",
                "required": True,
                "multi_select": False,
                "options": [
                    {"id": "rice", "name": "Rice Pilaf", "price": "0"},
                    {"id": "mash", "name": "Mashed Potatoes", "price": "0"},
                    {"id": "greens", "name": "Sauteed Greens", "price": "1.50"},
                ],
            },
        ],
    },
    {
        "id": "margherita_pizza",
        "name": "Margherita Pizza",
        "price": "12.99",
        "category": "main",
        "description": "Tomato, mozzarella and basil",
        "variants": [
            {"id": "small", "name": "Small", "price": "10.99"},
            {"id": "medium", "name": "Medium", "price": "12.99"},
            {"id": "large", "name": "Large", "price": "15.99"},
        ],
        "modifiers": [
            {
                "id": "crust",
                "name": "Crust",
                "required": True,
                "multi_select": False,
                "options": [
                    {"id": "classic", "name": "Classic", "price": "0"},
                    {"id": "thin", "name": "Thin Crust", "price": "0"},
                    {"id": "gluten_free", "name": "Gluten Free", "price": "2.00"},
                ],
            },
            {
                "id": "toppings",
                "name": "Toppings",
                "required": False,
                "multi_select": True,
                "options": [
                    {"id": "extra_cheese", "name": "Extra Cheese", "price": "1.50"},
                    {"id": "mushrooms", "name": "Mushrooms", "price": "1.00"},
                    {"id": "olives", "name": "Olives", "price": "1.00"},
                    {"id": "pepperoni", "name": "Pepperoni", "price": "2.00"},
                ],
            },
        ],
    },
    {
        "id": "classic_burger",
        "name": "Classic Burger",
        "price": "14.49",
        "category": "main",
        "description": "Beef patty, lettuce, tomato and house sauce",
        "modifiers": [
            {
                "id": "doneness",
                "name": "Doneness",
                "required": True,
                "multi_select": False,
                "options": [
                    {"id": "medium_rare", "name": "Medium Rare", "price": "0"},
                    {"id": "medium_well", "name": "Medium Well", "price": "0"},
                    {"id": "well_done", "name": "Well Done", "price": "0"},
                ],
            },
            {
                "id": "burger_addons",
                "name": "Add-ons",
                "required": False,
                "multi_select": True,
                "options": [
                    {"id": "bacon", "name": "Bacon", "price": "2.00"},
                    {"id": "cheddar", "name": "Cheddar", "price": "1.00"},
                    {"id": "avocado", "name": "Avocado", "price": "1.75"},
                ],
            },
        ],
    },
    {
        "id": "french_fries",
        "name": "French Fries",
        "price": "4.99",
        "category": "sides",
        "description": "Crispy fries with sea salt",
    },
    {
        "id": "onion_rings",
        "name": "Onion Rings",
        "price": "5.49",
        "category": "sides",
        "description": "Beer battered onion rings",
    },
    {
        "id": "side_salad",
        "name": "Side Salad",
        "price": "4.49",
        "category": "sides",
        "description": "Mixed greens with vinaigrette",
    },
    {
        "id": "iced_tea",
        "name": "Iced Tea",
        "price": "2.99",
        "category": "drinks",
        "description": "House-brewed iced tea with lemon",
    },
    {
        "id": "soda",
        "name": "Soda",
        "price": "2.49",
        "category": "drinks",
        "description": "Fountain soda",
        "variants": [
            {"id": "regular", "name": "Regular", "price": "2.49"},
            {"id": "large", "name": "Large", "price": "3.29"},
        ],
    },
    {
        "id": "sparkling_water",
        "name": "Sparkling Water",
        "price": "3.50",
        "category": "drinks",
        "description": "Chilled sparkling mineral water",
    },
    {
        "id": "cheesecake",
        "name": "Cheesecake",
        "price": "6.99",
        "category": "desserts",
        "description": "New York style cheesecake",
        "available": False,
    },
    {
        "id": "lava_cake",
        "name": "Chocolate Lava Cake",
        "price": "7.49",
        "category": "desserts",
        "description": "Warm chocolate cake with a molten center",
        "offer": {"type": "bundle", "value": "15", "description": "15% off with any main"},
    },
    {
        "id": "burger_combo",
        "name": "Burger Combo",
        "price": "17.99",
        "category": "combos",
        "description": "Classic burger with a side and a drink",
        "is_combo": True,
        "combo_slots": [
            {"category_name": "Side", "select_count": 1, "items": ["french_fries", "onion_rings", "side_salad"]},
            {"category_name": "Drink", "select_count": 1, "items": ["iced_tea", "soda", "sparkling_water"]},
        ],
        "modifiers": [
            {
                "id": "combo_doneness",
                "name": "Doneness",
                "required": True,
                "multi_select": False,
                "options": [
                    {"id": "medium_rare", "name": "Medium Rare", "price": "0"},
                    {"id": "medium_well", "name": "Medium Well", "price": "0"},
                    {"id": "well_done", "name": "Well Done", "price": "0"},
                ],
            },
        ],
    },
    {
        "id": "sharing_platter",
        "name": "Sharing Platter",
        "price": "24.99",
        "category": "combos",
        "description": "Pick any two sides and two drinks",
        "is_combo": True,
        "combo_slots": [
            {"category_name": "Sides", "select_count": 2, "items": ["french_fries", "onion_rings", "side_salad"]},
            {"category_name": "Drinks", "select_count": 2, "items": ["iced_tea", "soda", "sparkling_water"]},
        ],
    },
]

# Table number -> seat count.
TABLE_LAYOUT: dict[int, int] = {
    1: 2,
    2: 4,
    3: 4,
    4: 6,
    5: 8,
    6: 2,
    7: 4,
    8: 4,
    9: 2,
    10: 6,
    11: 4,
    12: 4,
}

STAFF_ROWS: list[dict[str, object]] = [
    {"id": "u1", "name": "John Doe", "email": "john@restaurant.com", "role": "waiter", "active": True},
    {"id": "u2", "name": "Jane Smith", "email": "jane@restaurant.com", "role": "manager", "active": True},
    {"id": "u3", "name": "Mike Johnson", "email": "mike@restaurant.com", "role": "kitchen", "active": True},
    {"id": "u4", "name": "Sarah Williams", "email": "sarah@restaurant.com", "role": "cashier", "active": True},
    {"id": "u5", "name": "Alex Brown", "email": "alex@restaurant.com", "role": "waiter", "active": False},
    {"id": "u6", "name": "Admin User", "email": "admin@restaurant.com", "role": "admin", "active": True},
]
