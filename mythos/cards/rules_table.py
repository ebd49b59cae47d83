"""
Continuous rule table.

Maps card id -> typed rule objects. The catalog attaches these to each
Card when it is built; the engine's calculators never look at card ids.
"""

from ..engine_core.card_rules import (
    ChakraBonus, CompanionInMission, CostAura, DefeatIfEmptyHand, DefeatedToHand, EnemyCostAura,
    EnemyInMission, EnemyPowerAura, HideInsteadOfDefeat, HideOnMove, HoldsEdge, ImmuneToEnemy, LookOnMove,
    MissionsWithKeyword, MoveAtEndOfRound, MoveOnMissionLoss, NoCompanionInMission, NoEnemyHiddenPlays,
    NoMovesFrom, NullifyStrongestEnemy, OnDefeatChakra,
    OnEnemyPlayed, OnlyWhereWinning, OtherGroupInMission, OtherVisibleFriendlies, PowerAura,
    RetainTokens, ReturnAtEndOfRound, SacrificeFor, SelfCost, SelfPower, UpgradeOver,
)


RULES: dict[str, tuple] = {
    # Chakra
    "005/130": (ChakraBonus(1),),
    "012/130": (ChakraBonus(1),),
    "025/130": (ChakraBonus(1, CompanionInMission(("Akamaru",))),),
    "044/130": (ChakraBonus(1, OtherGroupInMission("Leaf Village")),),
    "064/130": (ChakraBonus(1, scaling=MissionsWithKeyword("Sound Four")),),
    "077/130": (ChakraBonus(1, EnemyInMission()),),
    "031/130": (OnEnemyPlayed(chakra=1),),

    # Power
    "013/130": (SelfPower(-1, scaling=OtherVisibleFriendlies()),),
    "015/130": (PowerAura("Team 7", 1),),
    "042/130": (PowerAura("Team Guy", 1),),
    "079/130": (SelfPower(2, HoldsEdge()),),
    "084/130": (SelfPower(2, CompanionInMission(("Gaara",))),),
    "101/130": (SelfPower(1, CompanionInMission(("Tsunade", "Shizune"))),),
    "037/130": (OnEnemyPlayed(powerup=1),),
    "067/130": (NullifyStrongestEnemy(), ReturnAtEndOfRound()),
    "128/130": (EnemyPowerAura(-1),),

    # Cost
    "034/130": (CostAura("Team 8", discount=1, minimum=1),),
    "075/130": (
        SelfCost(2, on_reveal=True),
        HideInsteadOfDefeat(enemy_only=True),
    ),
    "090/130": (SelfCost(3, CompanionInMission(("Sasuke Uchiha",)), on_reveal=True),),
    "096/130": (
        SelfCost(1, CompanionInMission(("Naruto Uzumaki",))),
        ReturnAtEndOfRound(),
    ),
    "056/130": (EnemyCostAura(),),
    "125/130": (EnemyCostAura(),),

    # End of round
    "027/130": (ReturnAtEndOfRound(NoCompanionInMission(("Kiba Inuzuka",))),),
    "028/130": (ReturnAtEndOfRound(NoCompanionInMission(("Kiba Inuzuka",))),),
    "039/130": (RetainTokens(),),
    "043/130": (RetainTokens(),),
    "066/130": (ReturnAtEndOfRound(),),
    "094/130": (ReturnAtEndOfRound(),),
    "095/130": (ReturnAtEndOfRound(),),
    "097/130": (ReturnAtEndOfRound(),),
    "098/130": (ReturnAtEndOfRound(),),
    "102/130": (ReturnAtEndOfRound(),),
    "103/130": (ReturnAtEndOfRound(),),
    "117/130": (MoveAtEndOfRound(),),
    "123/130": (DefeatIfEmptyHand(),),

    # Defeat
    "003/130": (OnDefeatChakra(2, friendly_only=True),),
    "004/130": (DefeatedToHand(),),
    "048/130": (HideInsteadOfDefeat(),),
    "049/130": (SacrificeFor("Leaf Village"),),
    "076/130": (UpgradeOver(("Gaara",)), ImmuneToEnemy()),
    "129/130": (UpgradeOver(("Naruto Uzumaki",)), ImmuneToEnemy()),
    "130/130": (ImmuneToEnemy(),),
    "136/130": (OnDefeatChakra(1, friendly_only=False),),

    # Play and move
    "040/130": (OnlyWhereWinning(),),
    "018/130": (HideOnMove(),),
    "029/130": (UpgradeOver(("Kiba Inuzuka",)),),
    "035/130": (NoMovesFrom(),),
    "100/130": (LookOnMove(),),
    "051/130": (MoveOnMissionLoss(),),
    "063/130": (UpgradeOver(group="Sound Village"),),
    "111/130": (NoEnemyHiddenPlays(),),
}


def rules_for(card_id: str) -> tuple:
    return RULES.get(card_id, ())
