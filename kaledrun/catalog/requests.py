"""
Built-in request tables.

Three tables:
- NEED_REQUESTS: construction prompts offered once a need is required
- INFO_REQUESTS: tickless explanation and feedback screens
- EVENT_REQUESTS: everything else (random events, crises, follow-ups, chains)

Unlock tokens used in `requires`:
- need:marketplace
- need:beer
"""

from __future__ import annotations

from .schema import (
    AuthorityCheck,
    AuthorityFollowUpBoost,
    BoostType,
    ChainRole,
    CombatSpec,
    Effect,
    FollowUp,
    Option,
    Request,
    WeightedCandidate,
)


def _info(request_id: str, title: str, text: str, option_text: str = "Understood.") -> Request:
    """Single-option tickless screen that never triggers randomly."""
    return Request(
        id=request_id,
        title=title,
        text=text,
        options=(Option(option_text),),
        can_trigger_randomly=False,
        advances_tick=False,
    )


def _follow_up(option_index: int, delay_min: int, delay_max: int, *candidates: tuple[str, float]) -> FollowUp:
    return FollowUp(
        trigger_on_option_index=option_index,
        delay_min_ticks=delay_min,
        delay_max_ticks=delay_max,
        candidates=tuple(WeightedCandidate(rid, weight) for rid, weight in candidates),
    )


# ============================================================
# Need requests
# ============================================================

NEED_REQUESTS: tuple[Request, ...] = (
    Request(
        id="NEED_MARKETPLACE",
        title="A Place to Trade",
        text="Your growing village lacks a proper place to trade goods. The farmers ask for a marketplace.",
        options=(
            Option("BUILD", Effect(satisfaction=3, gold=-15, marketplace=True)),
            Option("DECLINE", Effect(satisfaction=-5)),
        ),
    ),
    Request(
        id="NEED_BREAD",
        title="Daily Bread",
        text="The mills stand idle and families bake on open fires. A village bakery would feed more mouths.",
        options=(
            Option("SUPPORT BAKERY", Effect(farmers=15, gold=-10, bread=True)),
            Option("IGNORE", Effect(health=-8)),
        ),
    ),
    Request(
        id="NEED_BEER",
        title="A Thirsty Village",
        text="After long days in the fields the villagers want a brewery of their own.",
        options=(
            Option("ALLOW", Effect(gold=-5, beer=True, satisfaction=5)),
            Option("FORBID"),
        ),
    ),
    Request(
        id="NEED_FIREWOOD",
        title="Cold Hearths",
        text="Firewood is gathered haphazardly and stored anywhere. An organized supply would keep homes warm and safe.",
        options=(
            Option("ORGANIZE", Effect(gold=-8, firewood=True, fire_risk=-5)),
            Option("DO NOTHING", Effect(fire_risk=10)),
        ),
    ),
    Request(
        id="NEED_WELL",
        title="Clean Water",
        text="The river water makes people sick. A central well would improve the health of the whole village.",
        options=(
            Option("BUILD", Effect(gold=-12, well=True, health=5)),
            Option("DECLINE", Effect(health=-5)),
        ),
    ),
)


# ============================================================
# Info requests (need explanations and authority feedback)
# ============================================================

INFO_REQUESTS: tuple[Request, ...] = (
    _info(
        "INFO_NEED_MARKETPLACE",
        "Marketplace Established",
        "Your marketplace is now operational. As long as this need stays fulfilled, "
        "the Market Day event can occur, bringing new trading opportunities to your village.",
    ),
    _info(
        "INFO_NEED_BREAD",
        "Bread Production Active",
        "Your bakery is now producing bread. Each tick, there is a 10% chance to gain "
        "+1 additional farmer growth, supporting population expansion.",
    ),
    _info(
        "INFO_NEED_BEER",
        "Brewery Operational",
        "Beer production has begun. The After-Work at the Tavern event is now unlocked, "
        "providing satisfaction-related benefits for your villagers.",
    ),
    _info(
        "INFO_NEED_FIREWOOD",
        "Firewood Supply Organized",
        "Professional firewood supply is now active. When an event increases fire risk, "
        "there is a 25% chance the increase is reduced by half, protecting your village.",
    ),
    _info(
        "INFO_NEED_WELL",
        "Central Well Constructed",
        "Your well is now operational. When an event grants health, there is a 50% chance "
        "to gain +1 additional health, improving overall village wellbeing.",
    ),
    _info(
        "INFO_TRADE_SUCCESS",
        "Negotiation Victory",
        "Your firm negotiating stance paid off. The merchant guild agrees to your terms, "
        "and your authority remains intact.",
        option_text="EXCELLENT",
    ),
    _info(
        "INFO_TRADE_FAILURE",
        "Negotiation Failure",
        "The merchants walked away from the table, insulted by your overreach. "
        "The deal is lost and your reputation damaged.",
        option_text="ACCEPT DEFEAT",
    ),
    _info(
        "INFO_RIOT_SUCCESS",
        "Crisis Averted",
        "Your words resonated with the crowd. They disperse peacefully, moved by your leadership.",
        option_text="GOOD",
    ),
    _info(
        "INFO_RIOT_FAILURE",
        "Riot Erupts",
        "The crowd jeered and threw stones. Violence broke out, and guards had to intervene. "
        "Your authority was not enough.",
        option_text="REGRET IT",
    ),
)


# ============================================================
# Event requests
# ============================================================

# Military & security
MILITARY_EVENTS: tuple[Request, ...] = (
    Request(
        id="EVT_RECRUIT_MILITIA",
        title="Call to Arms",
        text="The borders feel thin. Should we recruit farmers into the militia to bolster defenses, "
             "even if the fields suffer from fewer hands?",
        options=(
            Option("YES", Effect(land_forces=5, farmers=-5, gold=-5, authority=1)),
            Option("NO", Effect(satisfaction=5, authority=-1)),
        ),
    ),
    Request(
        id="EVT_RAID_SMALL",
        title="Shadows in the Woods",
        text="A small band of brigands has been spotted nearby. Do we drive them off by force "
             "or pay a toll to keep the peace?",
        combat=CombatSpec(
            enemy_forces=3,
            prep_delay_min_ticks=3,
            prep_delay_max_ticks=5,
            on_win=Effect(gold=10, authority=1),
            on_lose=Effect(gold=-10, authority=-2),
        ),
        options=(
            Option("FIGHT AND ROB"),
            Option("PAY TOLL", Effect(gold=-10, authority=-1)),
        ),
    ),
    Request(
        id="EVT_RAID_LARGE",
        title="The War Horns",
        text="A massive raiding force is at the gates! Stand your ground and fight, or the intruders "
             "will bring destruction to your village.",
        combat=CombatSpec(
            enemy_forces=8,
            prep_delay_min_ticks=3,
            prep_delay_max_ticks=5,
            on_win=Effect(gold=25, fire_risk=12, authority=2),
            on_lose=Effect(gold=-30, farmers=-8, satisfaction=-5, authority=-4),
        ),
        options=(
            Option("FIGHT", Effect(fire_risk=10)),
            Option("SURRENDER", Effect(gold=-20, satisfaction=-3, authority=-4)),
        ),
    ),
    Request(
        id="EVT_MILITIA_PAY",
        title="Soldier's Due",
        text="The militia's morale is slipping. They are demanding their seasonal wages to continue their service.",
        options=(
            Option("PAY", Effect(gold=-10)),
            Option("REFUSE", Effect(land_forces=-2, satisfaction=-4, authority=-2)),
        ),
    ),
    Request(
        id="EVT_RESTLESS_NIGHT",
        title="Whispers in the Dark",
        text="Strange noises have been reported near the storage huts. Send a patrol to investigate, "
             "or dismiss it as simple superstition?",
        combat=CombatSpec(
            enemy_forces=2,
            prep_delay_min_ticks=3,
            prep_delay_max_ticks=5,
            on_win=Effect(authority=1, satisfaction=2),
            on_lose=Effect(farmers=-5, satisfaction=-5, authority=-2),
        ),
        options=(
            Option("PATROL"),
            Option("IGNORE", Effect(farmers=-5, authority=-2)),
        ),
    ),
    Request(
        id="EVT_TRAIN_MILITIA",
        title="Drill Practice",
        text="A retired captain offers to drill your troops. This would make your defense forces "
             "much more formidable for future raids.",
        options=(
            Option("TRAIN", Effect(gold=-15, land_forces=5, authority=1)),
            Option("DECLINE"),
        ),
    ),
)

# Population & growth
POPULATION_EVENTS: tuple[Request, ...] = (
    Request(
        id="EVT_NEW_FARMERS",
        title="Wandering Souls",
        text="A group of sick travelers seeks land to till. They bring labor, but their makeshift "
             "camps pose a fire risk to the village.",
        options=(
            Option("ALLOW", Effect(farmers=6, land_forces=2, fire_risk=4, health=-2)),
            Option("DECLINE", Effect(satisfaction=2)),
        ),
    ),
    Request(
        id="EVT_EMIGRATION",
        title="The Long Goodbye",
        text="Dissatisfied with current conditions, several families are packing their wagons. "
             "Will you offer concessions to keep them?",
        options=(
            Option("CONCEDE", Effect(gold=-15, satisfaction=2)),
            Option("IGNORE", Effect(farmers=-7)),
        ),
    ),
    Request(
        id="EVT_HARVEST_HELPERS",
        title="The Golden Fields",
        text="The crops are ripening all at once. Hiring seasonal helpers could save the harvest.",
        options=(
            Option("HIRE", Effect(gold=-15, farmers=5)),
            Option("DO NOTHING", Effect(health=-4)),
        ),
    ),
    Request(
        id="EVT_VILLAGE_FESTIVAL",
        title="Summer Solstice",
        text="Organizing a grand festival with music and food would greatly strengthen the community's spirit.",
        options=(
            Option("HOLD", Effect(gold=-10, satisfaction=4)),
            Option("DECLINE"),
        ),
    ),
    Request(
        id="EVT_MEDICAL_HERBS",
        title="The Traveling Apothecary",
        text="A merchant offers a rare shipment of medicinal herbs. These could boost the health of the village.",
        options=(
            Option("BUY", Effect(gold=-15, health=5)),
            Option("DECLINE"),
        ),
    ),
    Request(
        id="EVT_TAX_REFORM",
        title="The Royal Ledger",
        text="Do you lower taxes to win favor, or raise them to fill the treasury for upcoming hardships?",
        options=(
            Option("LOWER TAXES", Effect(gold=-20, satisfaction=5, authority=-1)),
            Option("RAISE TAXES", Effect(gold=25, satisfaction=-8, authority=1)),
        ),
    ),
)

# Hazards
HAZARD_EVENTS: tuple[Request, ...] = (
    Request(
        id="EVT_FOREST_FIRE",
        title="Smoke on the Horizon",
        text="A nearby forest fire threatens the outskirts. If we don't send help, the winds may "
             "bring the disaster to our door.",
        options=(
            Option("FIGHT THE FIRE", Effect(gold=-5, health=-2)),
            Option("DO NOTHING", Effect(fire_risk=10)),
        ),
    ),
    Request(
        id="EVT_PLAGUE",
        title="The Black Flag",
        text="A plague is ravaging the next town over. Enforce a strict quarantine or hope fate is kind?",
        options=(
            Option("QUARANTINE", Effect(satisfaction=-4)),
            Option("IGNORE", Effect(health=-5)),
        ),
    ),
    Request(
        id="EVT_CLEAN_STORAGE",
        title="Spring Cleaning",
        text="The granaries are cluttered with old straw and debris. A deep clean would reduce the risk of fires.",
        options=(
            Option("ORGANIZE", Effect(gold=-10, fire_risk=-4)),
            Option("DECLINE"),
        ),
    ),
    Request(
        id="EVT_BAD_HARVEST",
        title="The Blighted Crop",
        text="An early frost has ruined the crops. Will the crown step in to provide compensation and food?",
        options=(
            Option("COMPENSATE", Effect(gold=-15, health=1)),
            Option("DO NOTHING", Effect(satisfaction=-4, farmers=-4)),
        ),
    ),
)

# Crises (selected by state conditions, never randomly)
CRISIS_EVENTS: tuple[Request, ...] = (
    Request(
        id="EVT_CRISIS_FIRE",
        title="The Village Burns",
        text="Warning: High Fire Risk! Flames have broken out between the houses. Organize a bucket "
             "line now or let the fire burn out on its own.",
        options=(
            Option("BUCKET LINE", Effect(gold=-20, fire_risk=-30, health=-3)),
            Option("LET IT BURN", Effect(farmers=-10, fire_risk=-20, satisfaction=-10)),
        ),
    ),
    Request(
        id="EVT_CRISIS_DISEASE",
        title="The Pale Cough",
        text="Warning: Low Health! A sickness is spreading rapidly. We must fund a healer now "
             "before the population collapses.",
        options=(
            Option("HIRE A HEALER", Effect(gold=-40, health=20)),
            Option("SORT OUT THE SICK", Effect(farmers=-15, health=15)),
        ),
    ),
    Request(
        id="EVT_CRISIS_UNREST",
        title="Unrest Escalates",
        text="Warning: Low Satisfaction! The people's anger has reached a breaking point. Appease "
             "the crowd or face a total revolt.",
        options=(
            Option("CONCESSIONS", Effect(gold=-40, satisfaction=20, authority=-4)),
            Option("CRACK DOWN", Effect(land_forces=-5, farmers=-10, satisfaction=15, authority=2)),
        ),
    ),
)

# Unlocked by needs
UNLOCKED_EVENTS: tuple[Request, ...] = (
    Request(
        id="EVENT_MARKET_DAY",
        title="Market Day",
        text="The marketplace is bustling with traders from distant lands. Will you focus on steady "
             "profits or take a riskier approach for greater gains?",
        requires=("need:marketplace",),
        options=(
            Option(
                "RISKY DEALS",
                authority_check=AuthorityCheck(
                    min_commit=0,
                    max_commit=25,
                    threshold=15,
                    on_success=Effect(gold=25, satisfaction=2, authority=1),
                    on_failure=Effect(gold=-10, satisfaction=-3),
                    refund_on_success_percent=100,
                    extra_loss_on_failure=2,
                ),
            ),
            Option("STEADY TRADE", Effect(gold=10)),
        ),
    ),
    Request(
        id="EVENT_TAVERN_AFTER_WORK",
        title="After-Work at the Tavern",
        text="After a long day of labor, the villagers gather at the tavern. Subsidize their drinks "
             "to boost morale, or let them enjoy at their own expense?",
        requires=("need:beer",),
        options=(
            Option("LET THEM PAY", Effect(satisfaction=2)),
            Option("SUBSIDIZE DRINKS", Effect(satisfaction=5, gold=-10)),
        ),
    ),
)

# Authority-gated events
AUTHORITY_EVENTS: tuple[Request, ...] = (
    Request(
        id="EVT_LOW_DEBT_COLLECTOR",
        title="The Debt Collector",
        text="A ruthless debt collector arrives, sensing your weakness. He demands payment with "
             "interest, or he will take what he is owed by force.",
        authority_min=0,
        authority_max=33,
        options=(
            Option("PAY THE DEBT", Effect(gold=-20, satisfaction=3)),
            Option("REFUSE TO PAY", Effect(land_forces=-3, gold=-10, authority=-3, satisfaction=-5)),
        ),
    ),
    Request(
        id="EVT_COMMIT_NEGOTIATE_TRADE",
        title="Trade Negotiation",
        text="A wealthy merchant guild seeks exclusive trading rights. You can leverage your authority "
             "to demand better terms, but failure could damage your reputation.",
        authority_min=34,
        authority_max=100,
        options=(
            Option(
                "NEGOTIATE HARD",
                authority_check=AuthorityCheck(
                    min_commit=0,
                    max_commit=40,
                    threshold=20,
                    on_success=Effect(gold=30, authority=1),
                    on_failure=Effect(authority=-1),
                    refund_on_success_percent=100,
                    success_feedback_request_id="INFO_TRADE_SUCCESS",
                    failure_feedback_request_id="INFO_TRADE_FAILURE",
                ),
            ),
            Option("ACCEPT THEIR TERMS", Effect(gold=15, authority=-1)),
        ),
    ),
    Request(
        id="EVT_COMMIT_QUELL_RIOT",
        title="Brewing Riot",
        text="Angry citizens gather in the square, demanding change. You can use your authority "
             "to calm them, but if you fail, violence may erupt.",
        authority_min=34,
        authority_max=100,
        options=(
            Option(
                "ADDRESS THE CROWD",
                authority_check=AuthorityCheck(
                    min_commit=0,
                    max_commit=25,
                    threshold=15,
                    on_success=Effect(satisfaction=5, authority=2),
                    on_failure=Effect(satisfaction=-5, land_forces=-3),
                    refund_on_success_percent=100,
                    extra_loss_on_failure=5,
                    success_feedback_request_id="INFO_RIOT_SUCCESS",
                    failure_feedback_request_id="INFO_RIOT_FAILURE",
                ),
            ),
            Option("SEND IN GUARDS", Effect(satisfaction=-5, land_forces=-3, authority=3)),
        ),
    ),
)

# The mysterious traveler and its follow-ups
TRAVELER_EVENTS: tuple[Request, ...] = (
    Request(
        id="EVT_MYSTERIOUS_TRAVELER_ENHANCED",
        title="Mysterious Traveler",
        text="A hooded stranger arrives at your gates, asking for shelter. He seems educated but "
             "evasive about his past.",
        authority_min=20,
        authority_max=100,
        options=(
            Option(
                "INVITE HIM",
                Effect(gold=-5),
                authority_check=AuthorityCheck(
                    min_commit=0,
                    max_commit=10,
                    follow_up_boosts=(
                        AuthorityFollowUpBoost(
                            target_request_id="EVT_TRAVELER_TEACHES",
                            boost_type=BoostType.LINEAR,
                            boost_value=4.0,
                            description="Increases chance traveler shares knowledge",
                        ),
                    ),
                ),
            ),
            Option("SEND AWAY"),
        ),
        follow_ups=(
            _follow_up(0, 2, 4, ("EVT_TRAVELER_TEACHES", 2), ("EVT_TRAVELER_BETRAYS", 1)),
            _follow_up(1, 3, 5, ("EVT_TRAVELER_CURSE", 2), ("EVT_TRAVELER_RETURNS", 1)),
        ),
    ),
    Request(
        id="EVT_TRAVELER_TEACHES",
        title="Grateful Teacher",
        text="The traveler reveals he is a scholar fleeing persecution. In gratitude he offers "
             "to teach your citizens advanced techniques.",
        can_trigger_randomly=False,
        options=(
            Option("ACCEPT HIS TEACHINGS", Effect(health=5, authority=2)),
            Option("POLITELY DECLINE"),
        ),
    ),
    Request(
        id="EVT_TRAVELER_BETRAYS",
        title="Saboteur Revealed",
        text="The traveler was actually a spy! He has stolen valuable information and fled.",
        can_trigger_randomly=False,
        options=(
            Option("DAMAGE CONTROL", Effect(gold=-20, authority=-2)),
            Option("ACCEPT THE LOSS", Effect(gold=-15, authority=-2, satisfaction=-2)),
        ),
    ),
    Request(
        id="EVT_TRAVELER_CURSE",
        title="Vengeful Wanderer",
        text="The rejected traveler curses your village as he leaves. Strange misfortunes begin to occur.",
        can_trigger_randomly=False,
        options=(
            Option("SEEK REMEDY", Effect(gold=-15, health=-3)),
            Option("IGNORE SUPERSTITION", Effect(satisfaction=-4, health=-3)),
        ),
    ),
    Request(
        id="EVT_TRAVELER_RETURNS",
        title="Second Chance",
        text="The traveler returns months later, having found success elsewhere. He remembers "
             "your rejection but is willing to forgive.",
        can_trigger_randomly=False,
        options=(
            Option("APOLOGIZE", Effect(satisfaction=3)),
            Option("MAINTAIN POSITION", Effect(authority=2)),
        ),
    ),
)

# Chain: bandit toll
BANDIT_TOLL_CHAIN: tuple[Request, ...] = (
    Request(
        id="CHAIN_BANDIT_TOLL_START",
        title="Blocked Road",
        text="A band of armed men has set up a barricade across the only trade road. Their leader "
             "steps forward: \"Toll is ten gold per cart. Pay or fight.\"",
        chain_id="bandit_toll",
        chain_role=ChainRole.START,
        chain_restart_cooldown_ticks=80,
        max_triggers=3,
        options=(
            Option("FIGHT THEM"),
            Option("PAY THE TOLL", Effect(gold=-10, authority=-1)),
        ),
        combat=CombatSpec(
            enemy_forces=5,
            prep_delay_min_ticks=2,
            prep_delay_max_ticks=4,
            on_win=Effect(gold=15, authority=2),
            on_lose=Effect(gold=-5, satisfaction=-3, authority=-2),
            follow_ups_on_win=(
                _follow_up(0, 2, 4, ("CHAIN_BANDIT_TOLL_LOOT", 3), ("CHAIN_BANDIT_TOLL_SURVIVOR", 2)),
            ),
            follow_ups_on_lose=(
                _follow_up(0, 2, 4, ("CHAIN_BANDIT_TOLL_REGROUP", 1)),
            ),
        ),
        follow_ups=(
            _follow_up(1, 4, 8, ("CHAIN_BANDIT_TOLL_RETURN", 3), ("CHAIN_BANDIT_TOLL_END_PEACE", 1)),
        ),
    ),
    Request(
        id="CHAIN_BANDIT_TOLL_LOOT",
        title="Spoils of Battle",
        text="The bandits are routed. Among their belongings your soldiers find stolen trade goods "
             "and a rough map of their hideout.",
        chain_id="bandit_toll",
        chain_role=ChainRole.MEMBER,
        can_trigger_randomly=False,
        options=(
            Option("RAID THE HIDEOUT", Effect(gold=20, land_forces=-2)),
            Option("BURN THE MAP", Effect(satisfaction=3)),
        ),
        follow_ups=(
            _follow_up(0, 3, 5, ("CHAIN_BANDIT_TOLL_END_VICTORY", 1)),
            _follow_up(1, 3, 5, ("CHAIN_BANDIT_TOLL_END_PEACE", 1)),
        ),
    ),
    Request(
        id="CHAIN_BANDIT_TOLL_SURVIVOR",
        title="A Bandit Speaks",
        text="One of the bandits survived. He offers information about a larger gang in exchange for his life.",
        chain_id="bandit_toll",
        chain_role=ChainRole.MEMBER,
        can_trigger_randomly=False,
        options=(
            Option("SPARE HIM", Effect(authority=-1, satisfaction=2)),
            Option("EXECUTE HIM", Effect(authority=1, satisfaction=-2)),
        ),
        follow_ups=(
            _follow_up(0, 4, 6, ("CHAIN_BANDIT_TOLL_END_PEACE", 2), ("CHAIN_BANDIT_TOLL_END_VICTORY", 1)),
            _follow_up(1, 3, 5, ("CHAIN_BANDIT_TOLL_END_VICTORY", 1)),
        ),
    ),
    Request(
        id="CHAIN_BANDIT_TOLL_REGROUP",
        title="Licking Wounds",
        text="The bandits defeated your men but did not press the attack. Rebuild strength before they return.",
        chain_id="bandit_toll",
        chain_role=ChainRole.MEMBER,
        can_trigger_randomly=False,
        options=(
            Option("RECRUIT MORE", Effect(gold=-10, land_forces=4)),
            Option("NEGOTIATE PEACE", Effect(gold=-15, authority=-2)),
        ),
        follow_ups=(
            _follow_up(0, 5, 8, ("CHAIN_BANDIT_TOLL_RETURN", 1)),
            _follow_up(1, 3, 5, ("CHAIN_BANDIT_TOLL_END_PEACE", 1)),
        ),
    ),
    Request(
        id="CHAIN_BANDIT_TOLL_RETURN",
        title="They Are Back",
        text="The bandits have returned with reinforcements. This time they demand double the toll or blood.",
        chain_id="bandit_toll",
        chain_role=ChainRole.MEMBER,
        can_trigger_randomly=False,
        options=(
            Option("FIGHT AGAIN"),
            Option("PAY DOUBLE", Effect(gold=-20, authority=-2)),
        ),
        combat=CombatSpec(
            enemy_forces=8,
            prep_delay_min_ticks=2,
            prep_delay_max_ticks=3,
            on_win=Effect(gold=25, authority=3, satisfaction=3),
            on_lose=Effect(gold=-15, satisfaction=-5, authority=-3),
            follow_ups_on_win=(_follow_up(0, 1, 2, ("CHAIN_BANDIT_TOLL_END_VICTORY", 1)),),
            follow_ups_on_lose=(_follow_up(0, 1, 2, ("CHAIN_BANDIT_TOLL_END_DEFEAT", 1)),),
        ),
        follow_ups=(
            _follow_up(1, 3, 5, ("CHAIN_BANDIT_TOLL_END_PEACE", 1)),
        ),
    ),
    Request(
        id="CHAIN_BANDIT_TOLL_END_VICTORY",
        title="Road Secured",
        text="The trade road is clear at last. Merchants return, and the village prospers from renewed commerce.",
        chain_id="bandit_toll",
        chain_role=ChainRole.END,
        can_trigger_randomly=False,
        options=(
            Option("CELEBRATE", Effect(satisfaction=5, gold=10)),
            Option("FORTIFY THE ROAD", Effect(gold=-10, land_forces=3)),
        ),
    ),
    Request(
        id="CHAIN_BANDIT_TOLL_END_PEACE",
        title="Uneasy Truce",
        text="The bandits move on to easier prey. The road reopens, though travelers remain wary.",
        chain_id="bandit_toll",
        chain_role=ChainRole.END,
        can_trigger_randomly=False,
        options=(
            Option("POST GUARDS", Effect(land_forces=-1, satisfaction=3)),
            Option("MOVE ON", Effect(satisfaction=1)),
        ),
    ),
    Request(
        id="CHAIN_BANDIT_TOLL_END_DEFEAT",
        title="A Costly Lesson",
        text="The bandits control the road now. Trade slows to a trickle and your people grow restless.",
        chain_id="bandit_toll",
        chain_role=ChainRole.END,
        can_trigger_randomly=False,
        options=(
            Option("SEEK ALLIES", Effect(gold=-5, authority=1)),
            Option("ENDURE", Effect(satisfaction=-5)),
        ),
    ),
)


EVENT_REQUESTS: tuple[Request, ...] = (
    MILITARY_EVENTS
    + POPULATION_EVENTS
    + HAZARD_EVENTS
    + CRISIS_EVENTS
    + UNLOCKED_EVENTS
    + AUTHORITY_EVENTS
    + TRAVELER_EVENTS
    + BANDIT_TOLL_CHAIN
)
