"""Text rendering of the deck's screen elements."""