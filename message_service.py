# message_service.py

import time
from config import MESSAGE_TYPES, MAX_MESSAGES

SUP_TRANSLATE = str.maketrans({
    '⁻': '-',   # ⁻  superscript minus
    '⁰': '0',   # ⁰
    '¹': '1',   # ¹
    '²': '2',   # ²
    '³': '3',   # ³
    '⁴': '4',   # ⁴
    '⁵': '5',   # ⁵
    '⁶': '6',   # ⁶
    '⁷': '7',   # ⁷
    '⁸': '8',   # ⁸
    '⁹': '9',   # ⁹
})

def strip_superscripts(text: str) -> str:
    """Replace superscript digits (isotope labels such as ¹³C) with plain ones."""
    return text.translate(SUP_TRANSLATE)


class MessageService:
    """
    MessageService keeps the most recent status messages of a session.

    Responsibilities:
      - Maintain a rolling queue of the most recent messages
      - Timestamp messages for context
      - Duplicate messages to stdout (optionally silenced)
      - Support different message types (info, warning, error)

    Attributes:
      - max_messages (int): Maximum number of messages to keep in the queue
      - messages (list): Queue of (timestamp, type, message) tuples
      - echo (bool): Whether messages are also printed to stdout
    """
    def __init__(self, max_messages=MAX_MESSAGES, echo=True):
        self.max_messages = max_messages
        self.echo = echo
        self.messages = []  # List of (timestamp, type, message)
        self.message_types = MESSAGE_TYPES

    def _add_message(self, message_type, message):
        timestamp = time.strftime("%H:%M")
        self.messages.append((timestamp, message_type, message))

        # Keep only the most recent messages
        if len(self.messages) > self.max_messages:
            self.messages = self.messages[-self.max_messages:]

    def _print(self, text):
        if self.echo:
            print(text)

    def log_info(self, message):
        """
        Log an informational message.

        Parameters:
          - message (str): The information message to log
        """
        self._add_message("info", strip_superscripts(message))
        self._print(f" {message}")

    def log_warning(self, message):
        """
        Log a warning message.

        Parameters:
          - message (str): The warning message to log
        """
        self._add_message("warning", message)
        self._print(f"WARNING: {message}")

    def log_error(self, message):
        """
        Log an error message.

        Parameters:
          - message (str): The error message to log
        """
        self._add_message("error", message)
        self._print(f"ERROR: {message}")

    def log_debug(self, message):
        """Print a debug message; debug messages are not queued."""
        self._print(f"DEBUG: {message}")

    def get_messages(self):
        return self.messages

    def get_formatted_messages(self):
        """
        Get formatted strings for all messages in the queue.

        Returns:
          - List of formatted message strings
          - List of corresponding colors
        """
        formatted = []
        colors = []

        for timestamp, msg_type, message in self.messages:
            prefix = self.message_types[msg_type]['prefix']
            if prefix:
                formatted.append(f"[{timestamp}] {prefix}: {message}")
            else:
                formatted.append(f"[{timestamp}] {message}")
            colors.append(self.message_types[msg_type]['color'])

        return formatted, colors

    def clear(self):
        """Clear all messages from the queue."""
        self.messages = []
