"""Demo questionnaire: ``python -m pigment [name] [directory] [options]``."""

from __future__ import annotations

import asyncio
import logging
import os
import random
import sys

from pigment import (
    Choice,
    ConfirmQuestion,
    MultiSelectQuestion,
    PromptCancelledError,
    SelectQuestion,
    TaskProgress,
    TaskQuestion,
    TaskResult,
    TextQuestion,
    create,
)


def _default_username() -> str:
    return prompt.read().get("name") or "John Doe"


async def _catch_pokemon():
    await asyncio.sleep(0.5)
    yield TaskProgress("Throwing Pokéball…")
    await asyncio.sleep(1)
    pokemon = random.choice(
        [
            {"name": "Mimikyu", "types": ["ghost", "fairy"]},
            {"name": "Bulbasaur", "types": ["grass", "poison"]},
        ]
    )
    yield TaskResult(pokemon, message=f"Caught {pokemon['name']}")


async def _not_coffee() -> bool:
    await asyncio.sleep(0)
    return prompt.read().get("drink") != "coffee"


prompt = create(
    ["<name>", "[directory]"],
    {
        "username": TextQuestion(
            alias="u",
            description="Name of the user",
            message="What is your name?",
            default=_default_username,
            validate=lambda value: len(value) > 3 or "Name must be longer than 3 characters",
            required=True,
        ),
        "pokemon": TaskQuestion(
            description="Pokémon data",
            message="Looking for Pokémon…",
            task=_catch_pokemon,
        ),
        "adult": ConfirmQuestion(
            description="Whether the user is an adult",
            message="Are you over 18?",
            default=False,
        ),
        "drink": SelectQuestion(
            description="Favorite drink of the user",
            message="What is your favorite drink?",
            choices=[
                Choice("coffee", "Coffee", "A hot drink made from roasted coffee beans"),
                Choice("tea", "Tea", "A hot drink made by infusing dried tea leaves in boiling water"),
            ],
            default="tea",
            required=True,
        ),
        "sugar": ConfirmQuestion(
            description="Whether the user likes sugar in their coffee",
            message="Do you like your coffee with sugar?",
            skip=_not_coffee,
        ),
        "fruits": MultiSelectQuestion(
            description="Fruits that the user likes",
            message="Which fruits do you like?",
            choices=[
                Choice("apple", "Apple", "An apple a day keeps the doctor away"),
                Choice("avocado", "Avocado", skip=lambda: prompt.read().get("drink") != "coffee"),
                Choice("banana", "Banana"),
                Choice("orange", "Orange"),
            ],
            validate=lambda value: bool(value) or "Please select at least one fruit",
        ),
        "feeling": TextQuestion(
            description="How the user is feeling",
            message="How are you feeling today?",
        ),
    },
)


def main() -> None:
    logging.basicConfig(
        level=getattr(logging, os.environ.get("PIGMENT_LOG_LEVEL", "warning").upper(), logging.WARNING),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    try:
        answers = asyncio.run(
            prompt.show(
                name="pigment-demo",
                description="A demo of pigment command-line prompts",
                version="0.1.0",
            )
        )
    except PromptCancelledError:
        print("Prompt cancelled")
        sys.exit(0)

    if answers is not None:
        print()
        for key, value in answers.items():
            print(f"{key}: {value}")


if __name__ == "__main__":
    main()
