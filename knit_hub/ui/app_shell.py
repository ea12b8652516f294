"""Application Host Shell.

The top-level ``CTk`` window: a header with the brand and the Google
auth widget, and a scrollable landing page with the hero, feature cards,
and community activity feed.

All dependencies are injected via the constructor.  The shell contains
no business logic; the page content is static and every auth concern is
delegated to ``GoogleAuthWidget`` and the services behind it.
"""

from __future__ import annotations

import customtkinter as ctk

from knit_hub.auth import SessionManager
from knit_hub.client_loader import RemoteClientLoader
from knit_hub.logger import StructuredLogger
from knit_hub.models.content_models import ActivityItem, FeatureCard
from knit_hub.services import ServiceContainer
from knit_hub.ui.components.google_auth_widget import GoogleAuthWidget
from knit_hub.ui.content import (
    ACTIVITY_TITLE,
    APP_TITLE,
    FEATURE_CARDS,
    HERO_TAGLINE,
    HERO_TITLE,
    RECENT_ACTIVITY,
)
from knit_hub.ui.theme import (
    ACCENT_PURPLE,
    ACCENT_ROSE,
    AVATAR_SIZE,
    CARD_BORDER,
    CARD_RADIUS,
    CONTENT_BG,
    CONTENT_CARD_BG,
    CONTENT_MAX_WIDTH,
    CORNER_RADIUS,
    FONT_AVATAR,
    FONT_BODY,
    FONT_BRAND,
    FONT_CARD_TITLE,
    FONT_HEADING,
    FONT_HERO,
    FONT_SMALL,
    HEADER_BG,
    HEADER_BORDER,
    HEADER_HEIGHT,
    ICON_TILE_SIZE,
    MAIN_WINDOW_HEIGHT,
    MAIN_WINDOW_WIDTH,
    MIN_WINDOW_HEIGHT,
    MIN_WINDOW_WIDTH,
    PADDING_LG,
    PADDING_MD,
    PADDING_SM,
    PADDING_XL,
    TEXT_LIGHT,
    TEXT_MUTED,
    TEXT_PRIMARY,
    TEXT_SECONDARY,
)


class AppShell(ctk.CTk):
    """Host Shell: the main application window.

    Lifecycle
    ---------
    1. On boot: renders the header and the static page immediately.
    2. The auth widget loads the remote client in the background and
       shows "Loading..." until the first session check completes.
    3. The OAuth callback receiver runs for as long as the window.
    4. On close: the auth widget tears down its observer and the
       receiver is stopped before the window is destroyed.

    Parameters
    ----------
    loader:
        Holder of the remote-service handle.
    session:
        Injectable view-state holder.
    services:
        Fully-wired service container.
    logger:
        Structured logger instance.
    """

    def __init__(
        self,
        loader: RemoteClientLoader,
        session: SessionManager,
        services: ServiceContainer,
        logger: StructuredLogger,
    ) -> None:
        super().__init__()

        self._loader = loader
        self._session = session
        self._services = services
        self._logger = logger

        self.title(APP_TITLE)
        ctk.set_appearance_mode("light")
        ctk.set_default_color_theme("blue")
        self.geometry(f"{MAIN_WINDOW_WIDTH}x{MAIN_WINDOW_HEIGHT}")
        self.minsize(MIN_WINDOW_WIDTH, MIN_WINDOW_HEIGHT)
        self.configure(fg_color=CONTENT_BG)

        # Graceful shutdown on window close
        self.protocol("WM_DELETE_WINDOW", self._on_close)

        self._build_header()
        self._build_page()

        if not self._services["oauth_callback_server"].start():
            self._logger.warning(
                "OAuth redirects cannot be received; Google sign-in will not complete."
            )

    # ==================================================================
    # Header
    # ==================================================================

    def _build_header(self) -> None:
        header = ctk.CTkFrame(
            self,
            height=HEADER_HEIGHT,
            fg_color=HEADER_BG,
            corner_radius=0,
            border_width=1,
            border_color=HEADER_BORDER,
        )
        header.pack(side="top", fill="x")
        header.pack_propagate(False)

        brand = ctk.CTkFrame(header, fg_color="transparent")
        brand.pack(side="left", padx=PADDING_MD)

        ctk.CTkLabel(
            brand,
            text="✔",
            font=FONT_BRAND,
            text_color=ACCENT_ROSE,
        ).pack(side="left", padx=(0, PADDING_SM))

        ctk.CTkLabel(
            brand,
            text=APP_TITLE,
            font=FONT_BRAND,
            text_color=TEXT_PRIMARY,
        ).pack(side="left")

        self._auth_widget = GoogleAuthWidget(
            parent=header,
            loader=self._loader,
            session=self._session,
            observer=self._services["session_observer_service"],
            auth_service=self._services["auth_service"],
            logger=self._logger,
        )
        self._auth_widget.pack(side="right", padx=PADDING_MD)

    # ==================================================================
    # Page body
    # ==================================================================

    def _build_page(self) -> None:
        page = ctk.CTkScrollableFrame(self, fg_color=CONTENT_BG)
        page.pack(side="top", fill="both", expand=True)

        column = ctk.CTkFrame(page, fg_color="transparent", width=CONTENT_MAX_WIDTH)
        column.pack(pady=PADDING_XL, padx=PADDING_LG)

        self._build_hero(column)
        self._build_feature_cards(column)
        self._build_activity_feed(column)

    def _build_hero(self, parent: ctk.CTkFrame) -> None:
        ctk.CTkLabel(
            parent,
            text=HERO_TITLE,
            font=FONT_HERO,
            text_color=TEXT_PRIMARY,
        ).pack(pady=(0, PADDING_MD))

        ctk.CTkLabel(
            parent,
            text=HERO_TAGLINE,
            font=FONT_BODY,
            text_color=TEXT_SECONDARY,
            wraplength=CONTENT_MAX_WIDTH - 200,
            justify="center",
        ).pack(pady=(0, PADDING_XL))

    def _build_feature_cards(self, parent: ctk.CTkFrame) -> None:
        grid = ctk.CTkFrame(parent, fg_color="transparent")
        grid.pack(fill="x", pady=(0, PADDING_XL))

        for index, card in enumerate(FEATURE_CARDS):
            grid.grid_columnconfigure(index, weight=1, uniform="features")
            self._feature_card(grid, card).grid(
                row=0,
                column=index,
                sticky="nsew",
                padx=(0 if index == 0 else PADDING_MD, 0),
            )

    @staticmethod
    def _feature_card(parent: ctk.CTkFrame, card: FeatureCard) -> ctk.CTkFrame:
        frame = ctk.CTkFrame(
            parent,
            fg_color=CONTENT_CARD_BG,
            corner_radius=CARD_RADIUS,
            border_width=1,
            border_color=CARD_BORDER,
        )
        inner = ctk.CTkFrame(frame, fg_color="transparent")
        inner.pack(fill="both", expand=True, padx=PADDING_LG, pady=PADDING_LG)

        tile = ctk.CTkFrame(
            inner,
            width=ICON_TILE_SIZE,
            height=ICON_TILE_SIZE,
            corner_radius=CORNER_RADIUS,
            fg_color=card.tile,
        )
        tile.pack(anchor="w", pady=(0, PADDING_MD))
        tile.pack_propagate(False)
        ctk.CTkLabel(
            tile,
            text=card.icon,
            font=FONT_CARD_TITLE,
            text_color=card.accent,
        ).place(relx=0.5, rely=0.5, anchor="center")

        ctk.CTkLabel(
            inner,
            text=card.title,
            font=FONT_CARD_TITLE,
            text_color=TEXT_PRIMARY,
            anchor="w",
        ).pack(fill="x", pady=(0, PADDING_SM))

        ctk.CTkLabel(
            inner,
            text=card.description,
            font=FONT_BODY,
            text_color=TEXT_SECONDARY,
            anchor="w",
            justify="left",
            wraplength=240,
        ).pack(fill="x")
        return frame

    def _build_activity_feed(self, parent: ctk.CTkFrame) -> None:
        section = ctk.CTkFrame(
            parent,
            fg_color=CONTENT_CARD_BG,
            corner_radius=CARD_RADIUS,
            border_width=1,
            border_color=CARD_BORDER,
        )
        section.pack(fill="x")

        inner = ctk.CTkFrame(section, fg_color="transparent")
        inner.pack(fill="both", expand=True, padx=PADDING_LG, pady=PADDING_LG)

        ctk.CTkLabel(
            inner,
            text=ACTIVITY_TITLE,
            font=FONT_HEADING,
            text_color=TEXT_PRIMARY,
            anchor="w",
        ).pack(fill="x", pady=(0, PADDING_MD))

        for item in RECENT_ACTIVITY:
            self._activity_row(inner, item).pack(fill="x", pady=(0, PADDING_MD))

    @staticmethod
    def _activity_row(parent: ctk.CTkFrame, item: ActivityItem) -> ctk.CTkFrame:
        row = ctk.CTkFrame(parent, fg_color="transparent")

        avatar = ctk.CTkFrame(
            row,
            width=AVATAR_SIZE,
            height=AVATAR_SIZE,
            corner_radius=AVATAR_SIZE // 2,
            fg_color=ACCENT_PURPLE,
        )
        avatar.pack(side="left", padx=(0, PADDING_MD))
        avatar.pack_propagate(False)
        ctk.CTkLabel(
            avatar,
            text=item.initial,
            font=FONT_AVATAR,
            text_color=TEXT_LIGHT,
        ).place(relx=0.5, rely=0.5, anchor="center")

        text = ctk.CTkFrame(row, fg_color="transparent")
        text.pack(side="left", fill="x", expand=True)
        ctk.CTkLabel(
            text,
            text=f"{item.user} {item.action}",
            font=FONT_BODY,
            text_color=TEXT_PRIMARY,
            anchor="w",
        ).pack(fill="x")
        ctk.CTkLabel(
            text,
            text=item.time,
            font=FONT_SMALL,
            text_color=TEXT_MUTED,
            anchor="w",
        ).pack(fill="x")
        return row

    # ==================================================================
    # Window close
    # ==================================================================

    def _on_close(self) -> None:
        """Tear down the auth widget and receiver before destroying."""
        self._auth_widget.destroy()
        self._services["oauth_callback_server"].stop()
        self.destroy()
