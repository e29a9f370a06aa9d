# rateorant/states/forms.py
from aiogram.fsm.state import State, StatesGroup


class SignInStates(StatesGroup):
    username = State()
    password = State()


class SignUpStates(StatesGroup):
    """Role is kept in state data: user or restaurant_owner"""
    username = State()
    email = State()
    password = State()
    password_conf = State()


class SearchStates(StatesGroup):
    query = State()


class ReviewStates(StatesGroup):
    rating = State()    # 1–5
    comment = State()   # optional


class RestaurantFormStates(StatesGroup):
    name = State()
    location = State()
    description = State()
    image_url = State()
    categories = State()
