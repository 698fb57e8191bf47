"""Modal dialog for typing a device's start address."""

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Input, Label

from rdmpatcher.exceptions import InvalidAddressError
from rdmpatcher.models import AddressSpace, PatchDevice, parse_start_address


class StartAddressModal(ModalScreen[int | None]):
    """
    Ask for a new start address.

    Dismisses with the parsed 1-based address, or None on cancel. Invalid
    input keeps the dialog open and shows the valid range.
    """

    DEFAULT_CSS = """
    StartAddressModal {
        align: center middle;
    }

    #dialog {
        width: 50;
        height: auto;
        background: $surface;
        border: thick $primary;
        padding: 1 2;
    }

    #title {
        width: 100%;
        text-style: bold;
        padding: 0 0 1 0;
    }

    #error {
        color: $error;
        height: auto;
    }

    #button-container {
        width: 100%;
        height: auto;
        align: center middle;
        padding: 1 0 0 0;
    }

    #button-container Button {
        margin: 0 1;
        min-width: 10;
    }
    """

    def __init__(self, device: PatchDevice, address_space: AddressSpace) -> None:
        super().__init__()
        self.device = device
        self.address_space = address_space

    def compose(self) -> ComposeResult:
        with Vertical(id="dialog"):
            yield Label(Text(self.device.display_label), id="title")
            yield Label("Start Address")
            yield Input(value=str(self.device.start_address), id="address-input")
            yield Label("", id="error")
            with Horizontal(id="button-container"):
                yield Button("OK", variant="primary", id="ok-btn")
                yield Button("Cancel", variant="default", id="cancel-btn")

    def on_mount(self) -> None:
        self.query_one("#address-input", Input).focus()

    def _submit(self) -> None:
        text = self.query_one("#address-input", Input).value
        try:
            address = parse_start_address(text, self.address_space)
        except InvalidAddressError as e:
            self.query_one("#error", Label).update(e.user_message)
            return
        self.dismiss(address)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        event.stop()
        self._submit()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        event.stop()
        if event.button.id == "ok-btn":
            self._submit()
        else:
            self.dismiss(None)
