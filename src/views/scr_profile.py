from textual import on, work
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.events import ScreenResume
from textual.widgets import Button, Label, Markdown

from utils.messages import UserLogoutMessage
from utils.pure import generate_markdown_table, short_date
from views.base_screen import BaseScreen


class ProfileScreen(BaseScreen):
    """
    Read-only account profile, with refresh and logout
    """

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with Vertical(id="div-profile"):
            yield Label("", id="label-profile-name")
            yield Markdown("", id="md-profile")
            with Horizontal(id="hort-profile-btns"):
                yield Button("Refresh", id="btn-refresh-profile", variant="primary")
                yield Button("Log out", id="btn-profile-logout", variant="error")

    async def on_mount(self) -> None:
        await self.render_profile()

    @on(ScreenResume)
    async def render_profile(self) -> None:
        profile = self.app.state.identity.profile
        if profile is None:
            self.query_one("#label-profile-name", Label).update("Not logged in")
            await self.query_one("#md-profile", Markdown).update("")
            return

        verified = "Verified" if profile.email_verified else "Not verified"
        self.query_one("#label-profile-name", Label).update(
            f"({profile.initial})  {profile.full_name}"
        )
        rows = [
            ["First Name", profile.first_name or "Not set"],
            ["Last Name", profile.last_name or "Not set"],
            ["Email", f"{profile.email} ({verified})"],
            ["Member Since", short_date(profile.created_at)],
            ["Last Login", short_date(profile.last_login)],
        ]
        await self.query_one("#md-profile", Markdown).update(
            generate_markdown_table(["Field", "Value"], rows, ["l", "l"])
        )

    @on(Button.Pressed, "#btn-refresh-profile")
    @work(exclusive=True)
    async def handle_refresh(self) -> None:
        result = await self.app.state.identity.refresh()
        if result.success:
            self.notify("Profile refreshed!")
            await self.render_profile()
        else:
            self.notify(f"Failed to refresh profile: {result.error}", severity="error")

    @on(Button.Pressed, "#btn-profile-logout")
    def handle_logout(self) -> None:
        self.post_message(UserLogoutMessage())
