"""
Card Catalog - Normalized card data for the base set.

Card structure:
- Id ("001/130" for characters, "MSS 01" for missions)
- Chakra cost and power
- Group and keywords
- Effects (trigger, display text, structured metadata)

Continuous rules come from rules_table.py and are attached here, once,
when the catalog is built.
"""

from __future__ import annotations

from ..engine_core.state import Card, CardEffect, CardType, EffectTrigger
from .rules_table import rules_for


# ============================================================================
# Effect helpers
# ============================================================================

def main(text: str, powerup: int = 0, chakra: int = 0, continuous: bool = False) -> CardEffect:
    return CardEffect(EffectTrigger.MAIN, text, continuous=continuous, powerup=powerup, chakra_bonus=chakra)


def upgrade(text: str, powerup: int = 0) -> CardEffect:
    return CardEffect(EffectTrigger.UPGRADE, text, powerup=powerup)


def ambush(text: str, powerup: int = 0) -> CardEffect:
    return CardEffect(EffectTrigger.AMBUSH, text, powerup=powerup)


def score(text: str, powerup: int = 0) -> CardEffect:
    return CardEffect(EffectTrigger.SCORE, text, powerup=powerup)


def continuous(text: str, chakra: int = 0) -> CardEffect:
    return main(text, chakra=chakra, continuous=True)


LEAF = "Leaf Village"
SOUND = "Sound Village"
SAND = "Sand Village"
INDEPENDENT = "Independent"
AKATSUKI = "Akatsuki"


def character(
    card_id: str,
    name: str,
    chakra: int,
    power: int,
    group: str,
    keywords: tuple[str, ...] = (),
    effects: tuple[CardEffect, ...] = (),
    title: str = "",
    rarity: str = "C",
) -> Card:
    return Card(
        card_id=card_id,
        name=name,
        title=title,
        chakra=chakra,
        power=power,
        group=group,
        keywords=keywords,
        effects=effects,
        card_type=CardType.CHARACTER,
        rarity=rarity,
        rules=rules_for(card_id),
    )


def mission(card_id: str, name: str, base_points: int, effects: tuple[CardEffect, ...] = ()) -> Card:
    return Card(
        card_id=card_id,
        name=name,
        effects=effects,
        card_type=CardType.MISSION,
        base_points=base_points,
    )


# ============================================================================
# Characters
# ============================================================================

_CHARACTERS: list[Card] = [
    # Leaf Village
    character("001/130", "Hiruzen Sarutobi", 3, 3, LEAF, ("Hokage",), (
        main("POWERUP 2 another friendly Leaf Village character.", powerup=2),
    ), title="The Professor"),
    character("003/130", "Tsunade", 3, 3, LEAF, ("Sannin",), (
        continuous("When any friendly character is defeated, gain 2 Chakra."),
    )),
    character("005/130", "Shizune", 2, 1, LEAF, (), (
        continuous("CHAKRA +1.", chakra=1),
    ), title="Tsunade's Assistant"),
    character("007/130", "Jiraiya", 4, 4, LEAF, ("Sannin",), (
        main("Play a Summon character anywhere, paying 1 less."),
    )),
    character("009/130", "Naruto Uzumaki", 2, 3, LEAF, ("Team 7",)),
    character("011/130", "Sakura Haruno", 2, 2, LEAF, ("Team 7",), (
        main("If there's another Team 7 character in this mission, draw a card."),
    )),
    character("013/130", "Sasuke Uchiha", 2, 4, LEAF, ("Team 7",), (
        continuous("This character has -1 Power for every other non-hidden friendly character in this mission."),
    )),
    character("015/130", "Kakashi Hatake", 3, 3, LEAF, ("Team 7",), (
        continuous("Other Team 7 characters in this mission have +1 Power."),
    )),
    character("017/130", "Choji Akimichi", 2, 1, LEAF, ("Team 10", "Jutsu"), (
        main("POWERUP 3.", powerup=3),
    ), title="Expansion Jutsu"),
    character("019/130", "Ino Yamanaka", 1, 1, LEAF, ("Team 10",), (
        main("If there's another Team 10 character in this mission, POWERUP 1.", powerup=1),
    )),
    character("021/130", "Shikamaru Nara", 1, 0, LEAF, ("Team 10",), (
        main("If you have the Edge, draw a card."),
    )),
    character("023/130", "Asuma Sarutobi", 3, 3, LEAF, ("Team 10",), (
        main("Move another Team 10 character from this mission."),
    )),
    character("025/130", "Kiba Inuzuka", 2, 2, LEAF, ("Team 8",), (
        continuous("If Akamaru is in the same mission, CHAKRA +1.", chakra=1),
    )),
    character("027/130", "Akamaru", 1, 2, LEAF, ("Team 8",), (
        continuous("If there isn't a Kiba Inuzuka in this mission at the end of the round, "
                   "you must return this character to your hand."),
    )),
    character("030/130", "Hinata Hyuga", 2, 2, LEAF, ("Team 8", "Taijutsu"), (
        main("Remove up to 2 Power tokens from an enemy character in play."),
    ), title="Gentle Fist"),
    character("032/130", "Shino Aburame", 2, 3, LEAF, ("Team 8",), (
        main("Each player draws a card."),
    ), title="Destruction Bugs"),
    character("034/130", "Yuhi Kurenai", 3, 3, LEAF, ("Team 8",), (
        continuous("Other Team 8 characters cost 1 less (min 1) to play in this mission."),
    )),
    character("036/130", "Neji Hyuga", 2, 2, LEAF, ("Team Guy",), (
        main("Remove up to 2 Power tokens from an enemy character in play."),
    )),
    character("038/130", "Rock Lee", 2, 3, LEAF, ("Team Guy",), (
        ambush("POWERUP 1.", powerup=1),
    ), title="Training"),
    character("040/130", "Tenten", 1, 2, LEAF, ("Team Guy",), (
        continuous("You can play this character only in a mission where you are currently winning."),
    )),
    character("042/130", "Gai Maito", 3, 3, LEAF, ("Team Guy",), (
        continuous("Other Team Guy characters in this mission have +1 Power."),
    )),
    character("044/130", "Anko Mitarashi", 2, 2, LEAF, (), (
        continuous("If you have at least one other friendly Leaf Village character in this mission, CHAKRA +1.",
                   chakra=1),
    )),
    character("046/130", "Ebisu", 3, 3, LEAF, (), (
        main("If there is a friendly non-hidden character with less Power than this character "
             "in this mission, draw a card."),
    )),
    character("047/130", "Iruka", 3, 3, LEAF, ("Academy",), (
        main("Move a Naruto Uzumaki character in play."),
    )),
    character("048/130", "Hayate Gekko", 3, 3, LEAF, (), (
        continuous("If this character would be defeated, hide it instead."),
    )),
    character("049/130", "Gemma Shiranui", 3, 3, LEAF, (), (
        continuous("If a friendly Leaf Village character in this mission would be hidden or defeated "
                   "by enemy effects, you can defeat this character instead."),
    )),

    # Sound Village
    character("050/130", "Orochimaru", 4, 4, SOUND, ("Sannin",), (
        ambush("Look at a hidden enemy character in this mission. If it costs 3 or less, "
               "take control of that character."),
    )),
    character("052/130", "Kabuto Yakushi", 3, 3, SOUND, (), (
        ambush("Draw the top card of the opponent's deck and put it hidden in any mission under your control."),
    ), title="The Mole"),
    character("055/130", "Kimimaro", 3, 3, SOUND, ("Weapon",), (
        ambush("Discard a card to hide a character in play with cost 3 or less."),
    )),
    character("057/130", "Jirobo", 2, 2, SOUND, ("Sound Four",), (
        main("POWERUP X. X is the number of missions where you have at least one friendly Sound Four character."),
    )),
    character("059/130", "Kidomaru", 3, 2, SOUND, ("Sound Four",), (
        main("Move X friendly character(s). X is the number of missions where you have "
             "at least one friendly Sound Four character."),
    )),
    character("061/130", "Sakon", 3, 2, SOUND, ("Sound Four",), (
        main("Draw X card(s). X is the number of missions where you have at least one friendly Sound Four character."),
    )),
    character("064/130", "Tayuya", 2, 1, SOUND, ("Sound Four",), (
        continuous("CHAKRA +X, where X is the number of missions where you have at least one "
                   "friendly Sound Four character."),
    )),
    character("068/130", "Dosu Kinuta", 3, 3, SOUND, ("Team Dosu",), (
        main("Look at a hidden character in play."),
        ambush("Defeat a hidden character in play."),
    )),
    character("070/130", "Zaku Abumi", 2, 4, SOUND, ("Team Dosu",), (
        main("Opponent gains 1 Chakra."),
    )),
    character("072/130", "Kin Tsuchi", 1, 3, SOUND, ("Team Dosu",), (
        main("Opponent draws a card."),
    )),

    # Sand Village
    character("074/130", "Gaara", 2, 2, SAND, ("Team Baki",), (
        main("POWERUP X where X is the number of friendly hidden characters in this mission."),
    )),
    character("075/130", "Gaara", 3, 3, SAND, ("Team Baki",), (
        continuous("If this character would be moved or defeated by enemy effects, instead hide them."),
        continuous("You can play this character while hidden paying 2 less."),
    )),
    character("077/130", "Kankuro", 3, 3, SAND, ("Team Baki",), (
        continuous("If there's at least one non-hidden enemy character in this mission, CHAKRA +1.", chakra=1),
    )),
    character("079/130", "Temari", 2, 2, SAND, ("Team Baki",), (
        continuous("If you have the Edge, this character has +2 Power."),
    )),
    character("081/130", "Baki", 3, 2, SAND, ("Team Baki",), (
        score("Draw a card."),
    )),
    character("084/130", "Yashamaru", 1, 1, SAND, (), (
        continuous("This character has +2 Power if there's a friendly Gaara in this mission."),
    )),

    # Independent and Akatsuki
    character("086/130", "Zabuza Momochi", 3, 5, INDEPENDENT, ("Rogue Ninja",)),
    character("088/130", "Haku", 2, 2, INDEPENDENT, ("Rogue Ninja",), (
        main("Draw 1 card. If you do, you must put 1 card from your hand on top of your deck."),
    )),
    character("090/130", "Itachi Uchiha", 3, 3, AKATSUKI, ("Rogue Ninja",), (
        continuous("If there is a Sasuke Uchiha in this mission, you can play this character "
                   "while hidden paying 3 less."),
    )),
    character("092/130", "Kisame Hoshigaki", 3, 4, AKATSUKI, ("Rogue Ninja",), (
        ambush("Remove up to 2 Power tokens from an enemy character in this mission and put them on this character."),
    )),
    character("094/130", "Gama Bunta", 3, 6, INDEPENDENT, ("Summon",), (
        continuous("At the end of the round, you must return this character to your hand."),
    )),
    character("095/130", "Gamahiro", 4, 6, INDEPENDENT, ("Summon",), (
        main("If there's a friendly character in this mission, draw a card."),
        continuous("At the end of the round, you must return this character to your hand."),
    )),
    character("096/130", "Gamakichi", 2, 3, INDEPENDENT, ("Summon",), (
        continuous("Pay 1 less to play this character if there's a friendly Naruto Uzumaki in this mission."),
        continuous("At the end of the round, you must return this character to your hand."),
    )),
    character("097/130", "Gamatatsu", 1, 2, INDEPENDENT, ("Summon",), (
        continuous("At the end of the round, you must return this character to your hand."),
    )),
    character("098/130", "Katsuyu", 3, 5, INDEPENDENT, ("Summon",), (
        main("If there is a friendly Tsunade in play, POWERUP 2.", powerup=2),
        continuous("At the end of the round, you must return this character to your hand."),
    )),
    character("099/130", "Pakkun", 1, 1, INDEPENDENT, ("Ninja Hound",), (
        score("Move this character."),
    )),
    character("100/130", "Ninja Hounds", 1, 1, INDEPENDENT, ("Ninja Hound",), (
        continuous("When this character moves to a different mission, look at a hidden character in that mission."),
    )),
    character("101/130", "Ton Ton", 1, 1, INDEPENDENT, ("Ninja Animal",), (
        continuous("If there's a friendly Tsunade or Shizune in this mission, this character has +1 Power."),
    )),

    # Uncommon
    character("012/130", "Sakura Haruno", 3, 2, LEAF, ("Team 7",), (
        continuous("CHAKRA +1.", chakra=1),
        upgrade("Draw 1 card. If you do so, you must discard 1 card."),
    ), title="Chakra Control", rarity="UC"),
    character("039/130", "Rock Lee", 4, 4, LEAF, ("Team Guy",), (
        continuous("This character doesn't lose Power tokens at the end of the round."),
        upgrade("POWERUP 2.", powerup=2),
    ), title="Front Lotus", rarity="UC"),
    character("043/130", "Gai Maito", 5, 5, LEAF, ("Team Guy",), (
        continuous("This character doesn't lose Power tokens at the end of the round."),
        upgrade("POWERUP 3.", powerup=3),
    ), rarity="UC"),
    character("002/130", "Hiruzen Sarutobi", 5, 4, LEAF, ("Hokage",), (
        main("Play a Leaf Village character anywhere paying 1 less."),
        upgrade("POWERUP 2 the character played with the MAIN effect.", powerup=2),
    ), title="Third Hokage", rarity="UC"),
    character("004/130", "Tsunade", 4, 4, LEAF, ("Sannin", "Jutsu"), (
        continuous("Defeated friendly characters go into your hand instead of your discard pile."),
        upgrade("Choose one character in your discard pile and put them into your hand."),
    ), title="Creation Rebirth", rarity="UC"),
    character("006/130", "Shizune", 3, 2, LEAF, ("Weapon",), (
        main("Move an enemy character with Power 3 or less from this mission."),
        upgrade("Gain 2 additional Chakra."),
    ), title="Poison Mist", rarity="UC"),
    character("008/130", "Jiraiya", 5, 5, LEAF, ("Sannin", "Jutsu"), (
        main("Play a Summon character anywhere, paying 2 less."),
        upgrade("MAIN effect: In addition, hide an enemy character with cost 3 or less in this mission."),
    ), title="Summoning Jutsu", rarity="UC"),
    character("010/130", "Naruto Uzumaki", 3, 3, LEAF, ("Team 7", "Jutsu"), (
        ambush("Move this character."),
    ), title="Sexy Jutsu", rarity="UC"),
    character("014/130", "Sasuke Uchiha", 3, 4, LEAF, ("Team 7", "Kekkei Genkai"), (
        ambush("Look at a random card in the opponent's hand."),
        upgrade("Discard the card you looked at and the opponent draws a card."),
    ), title="Sharingan", rarity="UC"),
    character("016/130", "Kakashi Hatake", 4, 4, LEAF, ("Team 7", "Kekkei Genkai"), (
        main("Copy the instant effect of an enemy character with cost 4 or less in this mission."),
        upgrade("MAIN effect: Instead, there is no cost limit."),
    ), title="Copy Ninja", rarity="UC"),
    character("018/130", "Choji Akimichi", 4, 4, LEAF, ("Team 10", "Jutsu"), (
        continuous("When this character moves, hide it."),
        upgrade("Move this character."),
    ), title="Expansion Jutsu", rarity="UC"),
    character("020/130", "Ino Yamanaka", 3, 0, LEAF, ("Team 10", "Jutsu"), (
        main("Take control of an enemy character with cost 2 or less in this mission."),
        upgrade("MAIN effect: Instead, the cost limit is 3."),
    ), title="Mind Transfer Jutsu", rarity="UC"),
    character("022/130", "Shikamaru Nara", 3, 3, LEAF, ("Team 10", "Jutsu"), (
        ambush("Move an enemy character from the mission that was just revealed to this mission."),
    ), title="Shadow Possession Jutsu", rarity="UC"),
    character("024/130", "Asuma Sarutobi", 4, 4, LEAF, ("Team 10",), (
        ambush("Draw a card, then discard a card. POWERUP 3 if you discarded a Team 10 character.", powerup=3),
    ), title="Flying Swallow", rarity="UC"),
    character("026/130", "Kiba Inuzuka", 3, 3, LEAF, ("Team 8", "Jutsu"), (
        main("Hide the lowest cost enemy character in this mission."),
        upgrade("MAIN effect: In addition, search your deck for Akamaru and play it in this mission for free."),
    ), title="Fang Over Fang", rarity="UC"),
    character("028/130", "Akamaru", 2, 3, LEAF, ("Team 8", "Jutsu"), (
        continuous("If there isn't a Kiba Inuzuka in this mission at the end of the round, "
                   "return this character to your hand."),
        ambush("POWERUP 2 a friendly Kiba Inuzuka in this mission.", powerup=2),
    ), title="Man Beast Clone", rarity="UC"),
    character("029/130", "Akamaru", 4, 4, LEAF, ("Team 8", "Jutsu"), (
        continuous("You can play this character as an upgrade over Kiba Inuzuka."),
        upgrade("Hide the lowest cost enemy character in this mission."),
    ), title="Dynamic Marking", rarity="UC"),
    character("031/130", "Hinata Hyuga", 3, 2, LEAF, ("Team 8", "Kekkei Genkai"), (
        continuous("When an enemy character is played in this mission, gain 1 Chakra."),
    ), title="Byakugan", rarity="UC"),
    character("033/130", "Shino Aburame", 5, 3, LEAF, ("Team 8",), (
        ambush("All characters played by the opponent cost 1 more this turn."),
        upgrade("Move this character."),
    ), title="Parasitic Insects", rarity="UC"),
    character("035/130", "Yuhi Kurenai", 4, 3, LEAF, ("Jutsu",), (
        continuous("Characters can't be moved from this mission."),
        upgrade("Defeat an enemy character with Power 1 or less in this mission."),
    ), title="Demonic Illusion", rarity="UC"),
    character("037/130", "Neji Hyuga", 4, 3, LEAF, ("Team Guy", "Kekkei Genkai"), (
        continuous("When an enemy character is played in this mission, POWERUP 1."),
        upgrade("Remove up to 3 Power tokens from an enemy character in play."),
    ), title="Eight Trigrams", rarity="UC"),
    character("041/130", "Tenten", 3, 3, LEAF, ("Team Guy", "Weapon"), (
        main("Defeat a hidden character in this mission."),
        upgrade("POWERUP 1 another friendly Leaf Village character in this mission.", powerup=1),
    ), title="Rising Twin Dragons", rarity="UC"),
    character("045/130", "Anko Mitarashi", 4, 3, LEAF, ("Jutsu",), (
        ambush("Defeat a hidden enemy character in play."),
    ), title="Hidden Shadow Snake Hands", rarity="UC"),
    character("051/130", "Orochimaru", 6, 5, SOUND, ("Sannin",), (
        continuous("If you lost the mission this character is assigned to, "
                   "move this character to the next unresolved mission."),
        upgrade("Defeat a hidden enemy character in this mission."),
    ), title="Sannin", rarity="UC"),
    character("053/130", "Kabuto Yakushi", 4, 2, SOUND, ("Jutsu",), (
        main("Draw a card."),
        upgrade("Play a character from your discard pile anywhere, paying its cost minus 3."),
    ), title="Dead Soul Jutsu", rarity="UC"),
    character("054/130", "Kabuto Yakushi", 5, 3, SOUND, ("Jutsu",), (
        main("POWERUP 1.", powerup=1),
        upgrade("Hide all non-hidden enemy characters with Power less than this character in this mission."),
    ), title="Chakra Scalpel", rarity="UC"),
    character("056/130", "Kimimaro", 5, 4, SOUND, ("Weapon",), (
        continuous("Enemy characters cost 1 more to play in this mission."),
        upgrade("Discard a card to hide a character in play with cost 5 or less."),
    ), title="Bone Pulse", rarity="UC"),
    character("058/130", "Jirobo", 4, 3, SOUND, ("Sound Four",), (
        main("POWERUP 1 each other friendly Sound Four character in this mission.", powerup=1),
        upgrade("MAIN effect: Instead, POWERUP 1 each friendly Sound Four character in every mission."),
    ), title="Earth Barrier", rarity="UC"),
    character("060/130", "Kidomaru", 5, 3, SOUND, ("Sound Four",), (
        main("Move a friendly character from this mission."),
        ambush("Defeat an enemy character with Power 1 or less in this mission."),
    ), title="Spider Web", rarity="UC"),
    character("062/130", "Sakon", 5, 3, SOUND, ("Sound Four",), (
        ambush("Copy the instant effect of a friendly Sound Four character in play."),
    ), title="Parasite Demon", rarity="UC"),
    character("063/130", "Ukon", 4, 3, SOUND, ("Sound Four",), (
        continuous("You can play this character as an upgrade over any Sound Village character."),
    ), title="Parasite Demon", rarity="UC"),
    character("065/130", "Tayuya", 4, 2, SOUND, ("Sound Four",), (
        ambush("POWERUP 2 a friendly Sound Village character in play.", powerup=2),
        upgrade("Search your deck for a Summon character and play it in this mission for free."),
    ), title="Demon Flute", rarity="UC"),
    character("066/130", "Doki", 2, 3, SOUND, ("Summon",), (
        main("Steal 1 Chakra from the opponent if there is a friendly Sound Four character in play."),
        continuous("At the end of the round, you must return this character to your hand."),
    ), title="Demon", rarity="UC"),
    character("067/130", "Rempart", 3, 0, SOUND, ("Summon",), (
        continuous("The strongest non-hidden enemy character in this mission has Power 0."),
        continuous("At the end of the round, you must return this character to your hand."),
    ), title="Barrier", rarity="UC"),
    character("069/130", "Dosu Kinuta", 5, 4, SOUND, ("Team Dosu",), (
        main("Force an enemy hidden character in this mission to reveal itself or be defeated."),
        upgrade("Look at a hidden character in play."),
    ), title="Melody Arm", rarity="UC"),
    character("071/130", "Zaku Abumi", 4, 5, SOUND, ("Team Dosu",), (
        main("If you have fewer characters in this mission than the opponent, "
             "move an enemy character from this mission."),
        upgrade("POWERUP 2.", powerup=2),
    ), title="Slicing Sound Wave", rarity="UC"),
    character("073/130", "Kin Tsuchi", 3, 3, SOUND, ("Team Dosu",), (
        main("Discard a card to hide an enemy character with Power 4 or less in this mission."),
        upgrade("MAIN effect: Instead, put the top card of your deck as a hidden character in this mission."),
    ), title="Bell Needles", rarity="UC"),
    character("076/130", "Ichibi", 6, 8, SAND, ("Summon", "Tailed Beast"), (
        continuous("You can play this character as an upgrade over Gaara."),
        continuous("Can't be hidden or defeated by enemy effects."),
    ), title="One-Tail", rarity="UC"),
    character("078/130", "Kankuro", 5, 4, SAND, ("Team Baki",), (
        ambush("Move an enemy character with Power 4 or less to this mission."),
        upgrade("Play a character while hidden in this mission, paying 1 less."),
    ), title="Puppet Master", rarity="UC"),
    character("080/130", "Temari", 4, 3, SAND, ("Team Baki",), (
        main("Move a friendly Sand Village character in play."),
        upgrade("Move this character."),
    ), title="Wind Scythe Jutsu", rarity="UC"),
    character("082/130", "Baki", 5, 3, SAND, ("Team Baki",), (
        score("Defeat a hidden enemy character in play."),
        upgrade("POWERUP 1 each friendly Sand Village character in this mission.", powerup=1),
    ), title="Blade of Wind", rarity="UC"),
    character("083/130", "Rasa", 3, 3, SAND, (), (
        score("Gain 1 additional Mission point if there is a friendly Sand Village character in this mission."),
    ), title="Fourth Kazekage", rarity="UC"),
    character("085/130", "Yashamaru", 3, 2, SAND, (), (
        score("Defeat this character and another character in this mission."),
    ), title="Gaara's Caretaker", rarity="UC"),
    character("087/130", "Zabuza Momochi", 5, 6, INDEPENDENT, ("Rogue Ninja", "Weapon"), (
        main("If there is only one enemy character in this mission, hide it."),
        upgrade("MAIN effect: Instead, defeat it."),
    ), title="Demon of the Mist", rarity="UC"),
    character("089/130", "Haku", 4, 3, INDEPENDENT, ("Rogue Ninja", "Kekkei Genkai"), (
        main("Discard the top X cards of the opponent's deck, where X is the number of friendly characters "
             "in this mission. POWERUP X."),
        upgrade("MAIN effect: Instead, discard from your own deck."),
    ), title="Crystal Ice Mirrors", rarity="UC"),
    character("091/130", "Itachi Uchiha", 5, 4, AKATSUKI, ("Rogue Ninja", "Kekkei Genkai"), (
        main("Look at a random card in the opponent's hand."),
        upgrade("MAIN effect: In addition, the opponent discards that card and draws a card."),
    ), title="Mangekyo Sharingan", rarity="UC"),
    character("093/130", "Kisame Hoshigaki", 6, 6, AKATSUKI, ("Rogue Ninja", "Weapon"), (
        main("Steal up to 2 Power tokens from an enemy character in this mission and put them on this character."),
        upgrade("MAIN effect: Instead, steal from any mission."),
    ), title="Samehada", rarity="UC"),
    character("102/130", "Manda", 4, 6, INDEPENDENT, ("Summon",), (
        ambush("Defeat a Summon character in play."),
        continuous("At the end of the round, you must return this character to your hand."),
    ), title="King of Snakes", rarity="UC"),
    character("103/130", "Kyodaigumo", 3, 4, SOUND, ("Summon",), (
        continuous("At the end of the round, hide this character and return it to your hand."),
    ), title="Giant Spider", rarity="UC"),

    # Rare
    character("104/130", "Tsunade", 5, 4, LEAF, ("Sannin",), (
        main("Spend any amount of additional Chakra. POWERUP X, where X is the amount of additional Chakra spent."),
        upgrade("POWERUP X."),
    ), title="Chakra Enhanced Strength", rarity="R"),
    character("105/130", "Jiraiya", 6, 5, LEAF, ("Sannin",), (
        main("Play a Summon character anywhere, paying 3 less."),
        upgrade("Move any enemy character from this mission."),
    ), title="Earth Style: Mud Wall", rarity="R"),
    character("106/130", "Kakashi Hatake", 5, 4, LEAF, ("Team 7",), (
        main("Discard the top card of an upgraded enemy character in play."),
        upgrade("MAIN effect: Copy any non-Upgrade instant effect from the discarded enemy character."),
    ), title="Curse Sealing", rarity="R"),
    character("107/130", "Sasuke Uchiha", 5, 5, LEAF, ("Team 7",), (
        main("You must move all other non-hidden friendly characters from this mission, if able."),
        upgrade("POWERUP X where X is the number of characters moved this way."),
    ), title="Chidori", rarity="R"),
    character("108/130", "Naruto Uzumaki", 5, 5, LEAF, ("Team 7", "Jutsu"), (
        main("Hide an enemy character with Power 3 or less in this mission."),
        upgrade("MAIN effect: POWERUP X, where X is the Power of the enemy character being hidden."),
    ), title="Believe it!", rarity="R"),
    character("109/130", "Sakura Haruno", 4, 3, LEAF, ("Team 7",), (
        main("Choose one of your Leaf Village characters in your discard pile and play it anywhere, "
             "paying its cost."),
        upgrade("MAIN effect: Instead, play the card paying 2 less."),
    ), title="Medical Ninja", rarity="R"),
    character("110/130", "Ino Yamanaka", 5, 4, LEAF, ("Team 10", "Jutsu"), (
        main("If there are 2 or more enemy characters in this mission, move the weakest non-hidden "
             "enemy character from this mission."),
        upgrade("MAIN effect: After moving, hide the enemy character."),
    ), title="Mind Destruction", rarity="R"),
    character("111/130", "Shikamaru Nara", 3, 2, LEAF, ("Team 10",), (
        continuous("The opponent cannot play characters while hidden in this mission."),
        upgrade("Hide an enemy character with Power 3 or less in this mission."),
    ), title="Shadow Strangle Jutsu", rarity="R"),
    character("112/130", "Choji Akimichi", 5, 4, LEAF, ("Team 10",), (
        main("Discard a card from your hand. POWERUP X where X is the cost of the discarded card."),
        upgrade("Repeat the MAIN effect."),
    ), title="Butterfly Bombing", rarity="R"),
    character("113/130", "Kiba Inuzuka", 4, 3, LEAF, ("Team 8",), (
        main("Hide a friendly Akamaru character. If you do, hide another character in this mission."),
        upgrade("MAIN effect: Instead, defeat both of them."),
    ), title="Fang Over Fang", rarity="R"),
    character("114/130", "Hinata Hyuga", 3, 2, LEAF, ("Team 8",), (
        main("POWERUP 2. POWERUP 1 another character.", powerup=2),
        upgrade("Remove all Power tokens from an enemy character in play."),
    ), title="Protective Eight Trigrams Sixty-Four Palms", rarity="R"),
    character("116/130", "Neji Hyuga", 4, 4, LEAF, ("Team Guy",), (
        main("Defeat a character in this mission with exactly Power 4."),
        upgrade("Defeat a character with exactly Power 6 in this mission."),
    ), title="Eight Trigrams Sixty-Four Palms", rarity="R"),
    character("117/130", "Rock Lee", 4, 5, LEAF, ("Team Guy",), (
        continuous("At the end of the round, you must move this character to another mission, if able."),
        upgrade("Reveal and discard the top card of your deck: POWERUP X where X is the cost of the "
                "discarded card."),
    ), title="Loopy Fist", rarity="R"),
    character("118/130", "Tenten", 4, 4, LEAF, ("Team Guy", "Jutsu"), (
        ambush("Defeat a hidden character in this mission. If the defeated character had a printed Power "
               "of 3 or less, defeat a hidden character in play."),
    ), title="Rising Twin Dragons", rarity="R"),
    character("119/130", "Kankuro", 4, 3, SAND, ("Team Baki",), (
        main("Defeat an enemy character with Power 3 or less in this mission."),
        upgrade("Move any character in play."),
    ), title="Secret Black Move: Iron Maiden", rarity="R"),
    character("120/130", "Gaara", 4, 4, SAND, ("Team Baki",), (
        main("Defeat up to 1 enemy character with Power 1 or less in every mission."),
        upgrade("POWERUP X, where X is the number of characters defeated by the MAIN effect."),
    ), title="Sand Coffin", rarity="R"),
    character("121/130", "Temari", 4, 3, SAND, ("Team Baki",), (
        main("Move any friendly character in play."),
        upgrade("Move any character in play."),
    ), title="Wind Scythe Jutsu", rarity="R"),
    character("122/130", "Jirobo", 4, 3, SOUND, ("Sound Four",), (
        main("POWERUP X where X is the number of characters in this mission."),
        upgrade("Defeat an enemy character with Power 1 or less in this mission."),
    ), title="Arhat Fist", rarity="R"),
    character("123/130", "Kimimaro", 5, 5, SOUND, ("Sound Five",), (
        continuous("At the end of the round, you must defeat this character if you have no cards in hand."),
        upgrade("Discard a card to defeat a character in play with cost 5 or less."),
    ), title="Earth Curse Mark", rarity="R"),
    character("124/130", "Kidomaru", 4, 3, SOUND, ("Sound Four",), (
        ambush("Defeat an enemy character with Power 3 or less in another mission."),
        upgrade("AMBUSH effect: Instead, the Power limit is 5 or less."),
    ), title="Spider Bow: Fierce Rip", rarity="R"),
    character("125/130", "Tayuya", 3, 2, SOUND, ("Sound Four",), (
        continuous("Non-hidden enemy characters cost an additional 1 Chakra to play in this mission."),
        upgrade("Play a Sound Village character, paying 2 less."),
    ), title="Demon Flute: Chains of Fantasia", rarity="R"),
    character("126/130", "Orochimaru", 5, 4, SOUND, ("Sannin",), (
        score("Defeat the weakest non-hidden enemy character in play."),
        upgrade("POWERUP 3.", powerup=3),
    ), title="Sword of Kusanagi", rarity="R"),
    character("128/130", "Itachi Uchiha", 5, 5, AKATSUKI, ("Rogue Ninja",), (
        upgrade("Move a friendly character in play."),
        continuous("Every enemy character in this mission has -1 Power."),
    ), title="Amaterasu", rarity="R"),
    character("129/130", "Kyubi", 6, 8, INDEPENDENT, ("Summon",), (
        continuous("You can play this character as an upgrade over Naruto Uzumaki."),
        continuous("Can't be hidden or defeated by enemy effects."),
    ), title="Demon Fox Cloak", rarity="R"),
    character("130/130", "Ichibi", 6, 8, INDEPENDENT, ("Summon",), (
        continuous("Can't be hidden or defeated by enemy effects."),
        upgrade("Choose a mission and defeat all hidden enemy characters assigned to it."),
    ), title="Gaara Playing Possum Jutsu", rarity="R"),

    # Secret
    character("136/130", "Sasuke Uchiha", 7, 8, LEAF, ("Team 7",), (
        continuous("When a character is defeated, gain 1 Chakra."),
        upgrade("You must choose a friendly non-hidden character and any enemy character "
                "in this mission and defeat them, if able."),
    ), title="Heaven Curse Mark", rarity="S"),
]


# ============================================================================
# Missions
# ============================================================================

_MISSIONS: list[Card] = [
    mission("MSS 01", "Call for Support", 2, (score("POWERUP 2 a character in play.", powerup=2),)),
    mission("MSS 02", "Chunin Exam", 3),
    mission("MSS 03", "Find the Traitor", 2, (score("Opponent discards a card from hand."),)),
    mission("MSS 04", "Assassination", 2, (score("Defeat an enemy hidden character."),)),
    mission("MSS 05", "Bring it Back", 3, (
        score("You must return one friendly non-hidden character in this mission to your hand, if able."),
    )),
    mission("MSS 06", "Rescue a Friend", 2, (score("Draw a card."),)),
    mission("MSS 07", "I Have to Go", 2, (score("Move a friendly hidden character in play."),)),
    mission("MSS 08", "Set a Trap", 1, (
        score("Put a card from your hand as a hidden character to any mission."),
    )),
    mission("MSS 10", "Chakra Training", 4),
]


CHARACTER_CARDS: dict[str, Card] = {card.card_id: card for card in _CHARACTERS}
MISSION_CARDS: dict[str, Card] = {card.card_id: card for card in _MISSIONS}


def get_card(card_id: str) -> Card:
    """
    Look up any card by id.

    Raises:
        KeyError: if the id is not in the catalog
    """
    if card_id in CHARACTER_CARDS:
        return CHARACTER_CARDS[card_id]
    if card_id in MISSION_CARDS:
        return MISSION_CARDS[card_id]
    raise KeyError(f"Unknown card id: {card_id}")


def all_character_cards() -> list[Card]:
    return sorted(CHARACTER_CARDS.values(), key=lambda c: c.card_id)


def all_mission_cards() -> list[Card]:
    return sorted(MISSION_CARDS.values(), key=lambda c: c.card_id)


# ============================================================================
# Starter decks
# ============================================================================

STARTER_DECKS: dict[str, tuple[tuple[str, ...], tuple[str, ...]]] = {
    "leaf": (
        ("001/130", "005/130", "009/130", "011/130", "012/130", "013/130", "015/130", "017/130",
         "019/130", "021/130", "023/130", "025/130", "027/130", "038/130", "039/130"),
        ("MSS 01", "MSS 02", "MSS 06"),
    ),
    "sound_sand": (
        ("050/130", "052/130", "055/130", "057/130", "059/130", "061/130", "064/130", "068/130",
         "070/130", "072/130", "074/130", "077/130", "079/130", "081/130", "084/130"),
        ("MSS 03", "MSS 04", "MSS 08"),
    ),
    "wanderers": (
        ("003/130", "030/130", "032/130", "034/130", "036/130", "040/130", "042/130", "047/130",
         "048/130", "049/130", "086/130", "088/130", "092/130", "098/130", "101/130"),
        ("MSS 05", "MSS 07", "MSS 10"),
    ),
}

COPIES_PER_STARTER_CARD = 2


def build_starter_deck(name: str) -> tuple[list[Card], list[Card]]:
    """
    Build a legal starter deck: two copies of each listed character, plus
    three missions.

    Raises:
        KeyError: if there is no starter deck with that name
    """
    if name not in STARTER_DECKS:
        raise KeyError(f"Unknown starter deck: {name}. Available: {', '.join(STARTER_DECKS)}")
    character_ids, mission_ids = STARTER_DECKS[name]
    deck = [get_card(card_id) for card_id in character_ids for _ in range(COPIES_PER_STARTER_CARD)]
    missions = [get_card(card_id) for card_id in mission_ids]
    return deck, missions
