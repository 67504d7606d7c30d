"""Reserved slot keys and action names shared with the dialogue engine."""

# Slot holding the name of the slot a form is currently asking for
REQUESTED_SLOT = "requested_slot"

# Key the dialogue engine uses to flag an interrupted loop
LOOP_INTERRUPTED_KEY = "is_interrupted"

# Action the dialogue engine runs while waiting for user input
ACTION_LISTEN_NAME = "action_listen"

# Prefix of the template uttered when a form asks for a slot
UTTER_ASK_PREFIX = "utter_ask_"
