"""Customer-facing copy for every conversation step, expressed as intents."""

from __future__ import annotations

from typing import Optional

from models.delivery import EligibilityVerdict
from models.intents import (
    Choice,
    ChoiceId,
    ChoicePromptIntent,
    LocationRequestIntent,
    TextIntent,
)
from services.delivery_eligibility import format_verdict


def welcome_offer(display_name: Optional[str], bonus_points: int) -> ChoicePromptIntent:
    greeting = f"Welcome {display_name}! 🎉" if display_name else "Welcome! 🎉"
    return ChoicePromptIntent(
        text=(
            f"{greeting}\n\nI'm your food ordering assistant. "
            "Let's get you started with a quick registration.\n\n"
            f"You'll earn {bonus_points} bonus points! 🎁\n\n"
            "Tap the button or just reply with your full name."
        ),
        choices=[Choice(id=ChoiceId.START_REGISTRATION.value, title="✅ Start Registration")],
    )


def registration_offer(bonus_points: int) -> ChoicePromptIntent:
    return ChoicePromptIntent(
        text=(
            f"Register in under a minute and get {bonus_points} bonus points! 🎁\n\n"
            "Tap the button or just reply with your full name."
        ),
        choices=[Choice(id=ChoiceId.START_REGISTRATION.value, title="✅ Start Registration")],
    )


def ask_name() -> TextIntent:
    return TextIntent(text="Great! Let's start with your name.\n\nWhat's your full name?")


def email_opt_in(name: str) -> ChoicePromptIntent:
    return ChoicePromptIntent(
        text=(
            f"Nice to meet you, {name}! 👋\n\n"
            "Would you like to provide your email for order receipts and exclusive offers?"
        ),
        choices=[
            Choice(id=ChoiceId.EMAIL_YES.value, title="Yes, add email"),
            Choice(id=ChoiceId.EMAIL_SKIP.value, title="Skip for now"),
        ],
    )


def ask_email() -> TextIntent:
    return TextIntent(text="Please enter your email address:")


def invalid_email() -> TextIntent:
    return TextIntent(
        text='Please enter a valid email address or type "skip" to continue without email.'
    )


def registration_complete(name: str, bonus_points: int, balance: int) -> TextIntent:
    return TextIntent(
        text=(
            f"🎉 Registration complete, {name}!\n\n"
            f"✅ You've earned {bonus_points} bonus points\n"
            f"💰 Current balance: {balance} points\n\n"
            "Next, we'll need your delivery address."
        )
    )


def address_method() -> ChoicePromptIntent:
    return ChoicePromptIntent(
        text="How would you like to provide your delivery address?",
        choices=[
            Choice(id=ChoiceId.SHARE_LOCATION.value, title="📍 Share Location"),
            Choice(id=ChoiceId.TYPE_ADDRESS.value, title="📝 Type Address"),
        ],
    )


def request_location() -> LocationRequestIntent:
    return LocationRequestIntent(
        text="📍 Please share your current location so we can check delivery to you."
    )


def ask_typed_address() -> TextIntent:
    return TextIntent(
        text=(
            "Please type your complete address:\n\n"
            "Include:\n• House/Building number\n• Street name\n• Area\n• City and Pincode"
        )
    )


def ask_location_details() -> TextIntent:
    return TextIntent(
        text=(
            "📍 Got your location!\n\n"
            "Please provide additional details:\n"
            "• Building/House name\n• Floor number\n• Landmark\n• Delivery instructions"
        )
    )


def confirm_address(summary: str, verdict: EligibilityVerdict, allow_confirm: bool) -> ChoicePromptIntent:
    choices = [Choice(id=ChoiceId.CHANGE.value, title="✏️ Change")]
    if allow_confirm:
        choices.insert(0, Choice(id=ChoiceId.CONFIRM.value, title="✅ Confirm"))
    return ChoicePromptIntent(
        text=f"Please confirm your delivery address:\n\n{summary}\n\n{format_verdict(verdict)}",
        choices=choices,
    )


def address_confirmed() -> TextIntent:
    return TextIntent(
        text=(
            "✅ Address confirmed!\n\n"
            "🍕 Great! Now let's take your order.\n\n"
            'Type "MENU" to see our offerings!'
        )
    )


def menu_placeholder() -> TextIntent:
    return TextIntent(
        text="🍕 Menu coming soon!\n\nFor now, here are our categories:\n1. Pizza\n2. Burgers\n3. Beverages"
    )


def welcome_back(name: str, points: int) -> TextIntent:
    return TextIntent(
        text=f'Welcome back, {name}! 🎉\n\nYou have {points} loyalty points.\n\nType "MENU" to start ordering!'
    )
