class PlainFormatter:
    def format(self, message: str) -> str:
        return message
