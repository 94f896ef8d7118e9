from focusloop.schemas.stats import Achievement, AchievementType

DEFAULT_CATEGORY = "personal"

XP_PER_SESSION = 10

# 8 focus sessions a day counts as a fully productive day
SESSIONS_PER_PRODUCTIVE_DAY = 8

COMPLETION_SOUND = "notification"

NOTIFICATION_TITLE = "Pomodoro Timer"

SESSION_COMPLETE_MESSAGES = {
    "focus": "Focus session complete! Time for a break. 🎉",
    "shortBreak": "Break is over. Ready to focus again? 💪",
    "longBreak": "Long break complete. Let's get back to work! 🚀",
}

ACHIEVEMENT_NOTIFICATION_TITLE = "🏆 Achievement Unlocked!"

ACHIEVEMENTS: list[Achievement] = [
    Achievement(id="first", title="First Session", description="Complete your first Pomodoro", icon="🎯", threshold=1, type=AchievementType.SESSIONS),
    Achievement(id="starter", title="Getting Started", description="Complete 10 Pomodoros", icon="🚀", threshold=10, type=AchievementType.SESSIONS),
    Achievement(id="focused", title="Focused Mind", description="Complete 50 Pomodoros", icon="🧠", threshold=50, type=AchievementType.SESSIONS),
    Achievement(id="master", title="Productivity Master", description="Complete 100 Pomodoros", icon="👑", threshold=100, type=AchievementType.SESSIONS),
    Achievement(id="marathon", title="Marathon Runner", description="Complete 500 Pomodoros", icon="🏆", threshold=500, type=AchievementType.SESSIONS),
    Achievement(id="week", title="Weekly Warrior", description="7-day streak", icon="⚡", threshold=7, type=AchievementType.STREAK),
    Achievement(id="month", title="Monthly Champion", description="30-day streak", icon="🔥", threshold=30, type=AchievementType.STREAK),
]

AMBIENT_SOUNDS = [
    {"id": "rain", "name": "Rain", "url": "/sounds/rain.mp3"},
    {"id": "cafe", "name": "Café", "url": "/sounds/cafe.mp3"},
    {"id": "forest", "name": "Forest", "url": "/sounds/forest.mp3"},
    {"id": "ocean", "name": "Ocean Waves", "url": "/sounds/ocean.mp3"},
    {"id": "white-noise", "name": "White Noise", "url": "/sounds/white-noise.mp3"},
]

AMBIENT_SOUND_IDS = {sound["id"] for sound in AMBIENT_SOUNDS}

MOTIVATIONAL_QUOTES = [
    "Great work! You're building momentum! 🚀",
    "Focus is the gateway to productivity! 💪",
    "Another step closer to your goals! 🎯",
    "You're on fire! Keep it up! 🔥",
    "Consistency is the key to success! ⭐",
    "Amazing focus! You're unstoppable! 💎",
]
