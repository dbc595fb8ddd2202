"""Static vocabulary for the dice-poker score sheet.

The combination list, the spoken aliases for each combination, and the number
words accepted as points. Order matters: when two aliases match the same number
of tokens, the one listed first wins.
"""

from enum import Enum
from types import MappingProxyType


class Combination(str, Enum):
    """Rows of the score sheet. The value is the label shown to players."""

    ONES = "1"
    TWOS = "2"
    THREES = "3"
    FOURS = "4"
    FIVES = "5"
    SIXES = "6"
    FOUR_OF_A_KIND = "каре"
    FULL_HOUSE = "фулл-хаус"
    SMALL_STRAIGHT = "короткий стрит"
    LARGE_STRAIGHT = "длинный стрит"
    POKER = "покер"
    ANY = "любая"


COMBINATIONS = tuple(Combination)

# Spoken forms, as the recognizer tends to write them
_ALIASES = {
    Combination.ONES: ("1", "единицы", "единица", "единички", "единичка", "один"),
    Combination.TWOS: ("2", "двойки", "двойка", "двоечки", "два"),
    Combination.THREES: ("3", "тройки", "тройка", "троечки", "три"),
    Combination.FOURS: ("4", "четвёрки", "четверки", "четвёрка", "четверка", "четыре"),
    Combination.FIVES: ("5", "пятёрки", "пятерки", "пятёрка", "пятерка", "пять"),
    Combination.SIXES: ("6", "шестёрки", "шестерки", "шестёрка", "шестерка", "шесть"),
    Combination.FOUR_OF_A_KIND: ("каре", "карэ", "четыре одинаковых"),
    Combination.FULL_HOUSE: ("фулл-хаус", "фул хаус", "фулхаус", "фуллхаус", "full house"),
    Combination.SMALL_STRAIGHT: (
        "короткий стрит", "малый стрит", "маленький стрит", "small straight"),
    Combination.LARGE_STRAIGHT: (
        "длинный стрит", "большой стрит", "large straight"),
    Combination.POKER: ("покер", "пять одинаковых", "poker"),
    Combination.ANY: ("любая", "любое", "любой", "шанс"),
}

COMBO_ALIASES = MappingProxyType(_ALIASES)

# Single-token number words accepted as points
NUMBER_WORDS = MappingProxyType({
    "ноль": 0, "нуль": 0,
    "один": 1, "одна": 1, "одно": 1,
    "два": 2, "две": 2,
    "три": 3, "четыре": 4, "пять": 5,
    "шесть": 6, "семь": 7, "восемь": 8, "девять": 9, "десять": 10,
    "одиннадцать": 11, "двенадцать": 12, "тринадцать": 13,
    "четырнадцать": 14, "пятнадцать": 15, "шестнадцать": 16,
    "семнадцать": 17, "восемнадцать": 18, "девятнадцать": 19,
    "двадцать": 20, "тридцать": 30, "сорок": 40, "пятьдесят": 50,
    "шестьдесят": 60, "семьдесят": 70, "восемьдесят": 80,
    "девяносто": 90, "сто": 100,
})
