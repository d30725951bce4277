"""Display labels for bodygraph codes.

Keys are the raw codes the engine reports (enum member names); unknown codes
are shown as-is.
"""

TYPE = {
    "en": {
        "MANIFESTOR": "Manifestor",
        "GENERATOR": "Generator",
        "MANIFESTING_GENERATOR": "Manifesting Generator",
        "PROJECTOR": "Projector",
        "REFLECTOR": "Reflector",
    },
    "zh": {
        "MANIFESTOR": "显示者",
        "GENERATOR": "生产者",
        "MANIFESTING_GENERATOR": "显示生产者",
        "PROJECTOR": "投射者",
        "REFLECTOR": "反映者",
    },
}

AUTHORITY = {
    "en": {
        "EMOTIONAL": "Emotional (Solar Plexus)",
        "SACRAL": "Sacral",
        "SPLENIC": "Splenic",
        "EGO_MANIFESTED": "Ego Manifested",
        "EGO_PROJECTED": "Ego Projected",
        "SELF_PROJECTED": "Self-Projected",
        "MENTAL": "Mental (Outer Authority)",
        "LUNAR": "Lunar",
    },
    "zh": {
        "EMOTIONAL": "情绪权威",
        "SACRAL": "荐骨权威",
        "SPLENIC": "直觉权威",
        "EGO_MANIFESTED": "意志力显示权威",
        "EGO_PROJECTED": "意志力投射权威",
        "SELF_PROJECTED": "自我投射权威",
        "MENTAL": "环境权威",
        "LUNAR": "月亮权威",
    },
}

DEFINITION = {
    "en": {
        "NONE": "No Definition",
        "SINGLE": "Single Definition",
        "SPLIT": "Split Definition",
        "TRIPLE_SPLIT": "Triple Split",
        "QUADRUPLE_SPLIT": "Quadruple Split",
    },
    "zh": {
        "NONE": "无定义",
        "SINGLE": "一分人",
        "SPLIT": "二分人",
        "TRIPLE_SPLIT": "三分人",
        "QUADRUPLE_SPLIT": "四分人",
    },
}

CENTER = {
    "en": {
        "HEAD": "Head",
        "AJNA": "Ajna",
        "THROAT": "Throat",
        "G": "G Center",
        "HEART": "Heart",
        "SACRAL": "Sacral",
        "SOLAR_PLEXUS": "Solar Plexus",
        "SPLEEN": "Spleen",
        "ROOT": "Root",
    },
    "zh": {
        "HEAD": "头脑中心",
        "AJNA": "逻辑中心",
        "THROAT": "喉咙中心",
        "G": "G中心",
        "HEART": "意志力中心",
        "SACRAL": "荐骨中心",
        "SOLAR_PLEXUS": "情绪中心",
        "SPLEEN": "直觉中心",
        "ROOT": "根部中心",
    },
}

STRATEGY = {
    "en": {
        "TO_INFORM": "To Inform",
        "TO_RESPOND": "To Respond",
        "WAIT_FOR_INVITATION": "Wait for the Invitation",
        "WAIT_LUNAR_CYCLE": "Wait a Lunar Cycle",
    },
    "zh": {
        "TO_INFORM": "告知",
        "TO_RESPOND": "等待回应",
        "WAIT_FOR_INVITATION": "等待邀请",
        "WAIT_LUNAR_CYCLE": "等待月亮周期",
    },
}

SIGNATURE = {
    "en": {
        "PEACE": "Peace",
        "SATISFACTION": "Satisfaction",
        "SUCCESS": "Success",
        "SURPRISE": "Surprise",
    },
    "zh": {
        "PEACE": "平和",
        "SATISFACTION": "满足",
        "SUCCESS": "成功",
        "SURPRISE": "惊喜",
    },
}

NOT_SELF = {
    "en": {
        "ANGER": "Anger",
        "FRUSTRATION": "Frustration",
        "FRUSTRATION_ANGER": "Frustration and Anger",
        "BITTERNESS": "Bitterness",
        "DISAPPOINTMENT": "Disappointment",
    },
    "zh": {
        "ANGER": "愤怒",
        "FRUSTRATION": "挫败",
        "FRUSTRATION_ANGER": "挫败与愤怒",
        "BITTERNESS": "苦涩",
        "DISAPPOINTMENT": "失望",
    },
}

# type code -> (strategy, signature, not-self theme)
DERIVATION = {
    "MANIFESTOR": ("TO_INFORM", "PEACE", "ANGER"),
    "GENERATOR": ("TO_RESPOND", "SATISFACTION", "FRUSTRATION"),
    "MANIFESTING_GENERATOR": ("TO_RESPOND", "SATISFACTION", "FRUSTRATION_ANGER"),
    "PROJECTOR": ("WAIT_FOR_INVITATION", "SUCCESS", "BITTERNESS"),
    "REFLECTOR": ("WAIT_LUNAR_CYCLE", "SURPRISE", "DISAPPOINTMENT"),
}
