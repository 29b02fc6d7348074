from textual.message import Message


class QuitRequestedMessage(Message):
    """
    broadcasted when the app is about to quit
    """

    bubble = True


class UserLogoutMessage(Message):
    """
    broadcasted when the user logs out
    """

    bubble = True


class NavigateMessage(Message):
    """
    Ask the app to open a route, e.g. "/manage-orders" or "/order/<id>".
    Posted by the sidebar and by screens; handled at App level.
    """

    bubble = True

    def __init__(self, path: str) -> None:
        super().__init__()
        self.path = path


class GoBackMessage(Message):
    """
    Return to the previously opened route
    """

    bubble = True

