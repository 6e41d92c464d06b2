"""Game constants and configuration."""

import os

# Game settings
MIN_PLAYERS = 3
MAX_PLAYERS = 12

# With fewer alive, connected players than this the vote is skipped
MIN_VOTING_PLAYERS = 3

# Undercover wins when alive players drop to this many
UNDERCOVER_SURVIVAL_COUNT = 2

# Rooms with nobody connected are dropped after this grace period
ABANDONED_ROOM_TTL_SECONDS = 300

# Scoring
CIVILIAN_CATCH_POINTS = 3  # each alive civilian, when the undercover is voted out
UNDERCOVER_SURVIVE_ELIMINATION_POINTS = 2  # undercover, when a civilian is voted out
UNDERCOVER_WIN_POINTS = 5
UNDERCOVER_CORRECT_GUESS_POINTS = 5
CIVILIAN_WRONG_GUESS_POINTS = 2

# Logging
LOG_LEVEL = os.environ.get("UNDERCOVER_LOG_LEVEL", "INFO").upper()

# Status messages
MSG_GAME_STARTED = "Game started! Discuss carefully."
MSG_GAME_STARTED_HARD = "Hard mode started! Trust no one, not even yourself."
MSG_VOTING_STARTED = "Voting has started!"
MSG_NO_VOTES = "No votes cast. Discussion continues."
MSG_NO_MAJORITY = "No majority. No one was eliminated."
MSG_WAITING_FOR_RECONNECT = "Not enough connected players to vote. Waiting for players to reconnect."
MSG_PLAY_AGAIN = "Play again: waiting in lobby."

# Word pairs for the game
# Format: (civilian_word, undercover_word)
# An empty undercover word means the undercover player gets no word at all
WORD_PAIRS = [
    ("Apple", "Android"),
    ("Pizza", "Burger"),
    ("Coffee", "Tea"),
    ("Dog", "Cat"),
    ("Summer", "Winter"),
    ("Netflix", "Disney"),
    ("Google", "Apple"),
    ("Messi", "Ronaldo"),
    ("YouTube", "TikTok"),
    ("Facebook", "Instagram"),
    ("WhatsApp", "Telegram"),
    ("Amazon", "Walmart"),
    ("iPhone", "Android"),
    ("Lion", "Tiger"),
    ("Batman", "Superman"),
    ("Train", "Airplane"),

    # Blank undercover word
    ("Island", ""),
    ("Desert", ""),
    ("Mountain", ""),
    ("Dubai", ""),
    ("Tokyo", ""),
    ("Rome", ""),
    ("Beach", ""),
    ("Forest", ""),
    ("London", ""),
    ("Berlin", ""),
    ("Pyramids", ""),
    ("TajMahal", ""),
    ("Volcano", ""),
    ("Paris", ""),
    ("Sydney", ""),
]
