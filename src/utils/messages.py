from textual.message import Message


class QuitRequestedMessage(Message):
    """
    broadcasted when the app is about to quit
    """

    bubble = True


class UserLogoutMessage(Message):
    """
    broadcasted when the user asks to log out
    """

    bubble = True


class CartChangedMessage(Message):
    """
    Fired after any cart mutation (add from products screen, +/- or remove in cart).
    Refreshes the cart screen and the cart badge in the sidebar.

    Post at App level when sent from outside CartScreen.
    """

    bubble = True


class NewOrderMessage(Message):
    """
    Fired after a successful checkout. Listened to by the orders screen.
    """

    bubble = True

    def __init__(self, order_id: int) -> None:
        super().__init__()
        self.order_id = order_id


class CatalogUpdatedMessage(Message):
    """
    Fired when a retrieval settles, successful or not
    """

    bubble = True

    def __init__(self, ok: bool, error: str = "") -> None:
        super().__init__()
        self.ok = ok
        self.error = error


class ModeSwitchedMessage(Message):
    """
    fired whenever switch_mode is called
    must be fired from app level
    """

    bubble = True

    def __init__(self, old_mode: str, new_mode: str) -> None:
        super().__init__()
        self.old_mode = old_mode
        self.new_mode = new_mode
