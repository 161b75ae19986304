"""Main window of the wallpaper configuration tool."""

from __future__ import annotations

import argparse
import sys
import tkinter as tk
from typing import Callable, Sequence

from livebgconf.bg import BgInfo, BgProp, PropType, WallpaperList
from livebgconf.cmd import DEFAULT_SOCKET_PATH, Client, DaemonError
from livebgconf.widgets import (
    ColorButton,
    FloatSlider,
    PathField,
    checkbox,
    int_slider,
    labeled_frame,
    message_box,
    option_menu,
    question_box,
)

BNCOL_WIDTH = 42
BNCOL_HEIGHT = 32
PROPCOL_WIDTH = 48
PROPCOL_HEIGHT = 24

BG_MODES = ("solid", "vgrad", "hgrad")
BG_MODE_LABELS = ("Solid color", "Vertical gradient", "Horizontal gradient")
FIT_MODES = ("full", "crop", "stretch")
FIT_MODE_LABELS = ("Full", "Crop", "Stretch")
COLOR_PROPERTIES = ("xlivebg.color", "xlivebg.color2")

_INVALID_RANGE = "INVALID SLIDER RANGE"
_ABOUT_TEXT = (
    "Live wallpaper configuration tool\n\n"
    "Pick a wallpaper, tweak its settings and the global background\n"
    "settings; changes are applied immediately. Use File > Save to\n"
    "write them to the daemon's configuration file.\n"
)


def clean_path(text: str) -> str:
    """Strip leading whitespace and cut the text at the first line break."""
    text = text.lstrip()
    for index, char in enumerate(text):
        if char in "\r\n":
            return text[:index]
    return text


def fit_index(name: str) -> int:
    """Index of a fit mode name in FIT_MODES; unknown names count as "full"."""
    cleaned = clean_path(name)
    if cleaned in FIT_MODES:
        return FIT_MODES.index(cleaned)
    return 0


def fps_from_update_rate(usec: int) -> int:
    """Frames per second for an update interval given in microseconds."""
    if usec <= 0:
        raise ValueError(f"invalid update interval: {usec}")
    return 1_000_000 // usec


def _to16(value: float) -> int:
    return int(value * 65535.0)


def _set_enabled(widget, enabled: bool) -> None:
    """Enable or disable a widget and everything inside it."""
    if isinstance(widget, ColorButton):
        widget.set_enabled(enabled)
        return
    try:
        widget.configure(state=tk.NORMAL if enabled else tk.DISABLED)
    except tk.TclError:
        pass
    for child in widget.winfo_children():
        _set_enabled(child, enabled)


class ConfigApp:
    """Builds the configuration window and forwards every change to the daemon."""

    def __init__(self, root, client):
        self.root = root
        self.client = client
        self.wallpapers = WallpaperList(client)
        self.wallpapers.refresh()
        if not len(self.wallpapers):
            raise DaemonError("Failed to retrieve wallpaper list")

        self.bgcol = [[0.0] * 4, [0.0] * 4]
        self.cropdir = [0.0] * 4
        self.crop_zoom = 1.0
        self.user_fps = 30
        self.force_fps = False
        self._wallpaper_box = None

        self._create_menu()

        main = tk.Frame(root)
        main.grid(row=0, column=0, sticky="nsew")
        root.columnconfigure(0, weight=1)
        root.rowconfigure(0, weight=1)

        self.status = tk.Label(root, text="", anchor=tk.W)
        self.status.grid(row=1, column=0, sticky="ew")

        globals_frame = labeled_frame(main, "Global settings")
        globals_frame.grid(row=0, column=0, sticky="nsew", padx=2, pady=2)

        right = tk.Frame(main)
        right.grid(row=0, column=1, sticky="nsew", padx=2, pady=2)
        main.columnconfigure(1, weight=1)
        main.rowconfigure(0, weight=1)

        self.wallpaper_frame = labeled_frame(right, "Wallpaper settings")
        self.wallpaper_frame.pack(side=tk.TOP, fill=tk.X)
        tk.Button(right, text="Save configuration", command=self.save_config).pack(
            side=tk.BOTTOM, fill=tk.X
        )

        self._build_globals(globals_frame)
        self.rebuild_wallpaper_ui()

    # --- helpers ---------------------------------------------------------

    def set_status(self, text: str) -> None:
        self.status.configure(text=text)

    def _query(self, getter: Callable, name: str, default):
        try:
            return getter(name)
        except DaemonError:
            return default

    def _send(self, setter: Callable, *args) -> None:
        try:
            setter(*args)
        except DaemonError as exc:
            self.set_status(str(exc))

    # --- menu ------------------------------------------------------------

    def _create_menu(self) -> None:
        menubar = tk.Menu(self.root)
        file_menu = tk.Menu(menubar, tearoff=False)
        file_menu.add_command(label="Save", underline=0, accelerator="Ctrl-S",
                              command=self.save_config)
        file_menu.add_command(label="Quit", underline=0, accelerator="Ctrl-Q",
                              command=self.root.destroy)
        menubar.add_cascade(label="File", underline=0, menu=file_menu)

        help_menu = tk.Menu(menubar, tearoff=False)
        help_menu.add_command(label="About", underline=0, command=self._about)
        menubar.add_cascade(label="Help", underline=0, menu=help_menu)

        self.root.configure(menu=menubar)
        self.root.bind_all("<Control-s>", lambda _event: self.save_config())
        self.root.bind_all("<Control-q>", lambda _event: self.root.destroy())

    def _about(self) -> None:
        message_box("info", "About", _ABOUT_TEXT)

    # --- global settings -------------------------------------------------

    def _build_globals(self, parent) -> None:
        vbox = tk.Frame(parent)
        vbox.pack(fill=tk.BOTH, expand=True)

        tk.Label(vbox, text="Wallpapers:", anchor=tk.W).pack(fill=tk.X)
        self._create_bglist(vbox)

        image = self._query(self.client.getprop_str, "xlivebg.image", None)
        frame = labeled_frame(vbox, "Background image")
        frame.pack(fill=tk.X)
        PathField(
            frame,
            clean_path(image) if image is not None else None,
            lambda path: self._send(self.client.setprop_str, "xlivebg.image", path),
        ).pack(fill=tk.X)

        mask = self._query(self.client.getprop_str, "xlivebg.anim_mask", None)
        frame = labeled_frame(vbox, "Animation mask")
        frame.pack(fill=tk.X)
        PathField(
            frame,
            clean_path(mask) if mask is not None else None,
            lambda path: self._send(self.client.setprop_str, "xlivebg.anim_mask", path),
        ).pack(fill=tk.X)

        self._build_bgcolor(vbox)
        self._build_fit(vbox)
        self._build_fps(vbox)

    def _create_bglist(self, parent) -> None:
        holder = tk.Frame(parent)
        holder.pack(fill=tk.BOTH, expand=True)
        scrollbar = tk.Scrollbar(holder, orient=tk.VERTICAL)
        self.bglist = tk.Listbox(
            holder,
            height=5,
            selectmode=tk.BROWSE,
            exportselection=False,
            yscrollcommand=scrollbar.set,
        )
        scrollbar.configure(command=self.bglist.yview)
        self.bglist.pack(side=tk.LEFT, fill=tk.BOTH, expand=True)
        scrollbar.pack(side=tk.RIGHT, fill=tk.Y)

        for bg in self.wallpapers:
            self.bglist.insert(tk.END, bg.name)

        active = self.wallpapers.active()
        if active is not None:
            index = next(i for i, bg in enumerate(self.wallpapers) if bg is active)
            self.bglist.selection_set(index)
            self.bglist.see(index)

        self.bglist.bind("<<ListboxSelect>>", self._on_select)
        self.bglist.bind("<Double-Button-1>", self._on_select)

    def _on_select(self, _event=None) -> None:
        selection = self.bglist.curselection()
        if not selection:
            return
        name = self.bglist.get(selection[0])
        if not name:
            return
        self._send(self.wallpapers.switch, name)
        self.rebuild_wallpaper_ui()

    def _build_bgcolor(self, parent) -> None:
        bgmode = self._query(self.client.getprop_int, "xlivebg.bgmode", 0)
        for index, prop in enumerate(COLOR_PROPERTIES):
            vec = self._query(self.client.getprop_vec, prop, None)
            if vec is not None:
                self.bgcol[index] = list(vec)

        frame = labeled_frame(parent, "Background color")
        frame.pack(fill=tk.X)
        hbox = tk.Frame(frame)
        hbox.pack(fill=tk.X)

        selected = bgmode if 0 <= bgmode < len(BG_MODES) else 0
        option_menu(hbox, BG_MODE_LABELS, selected, self._bgmode_changed).pack(side=tk.LEFT)

        buttons = []
        for index in range(2):
            color = tuple(_to16(c) for c in self.bgcol[index][:3])
            button = ColorButton(
                hbox,
                BNCOL_WIDTH,
                BNCOL_HEIGHT,
                color,
                lambda r, g, b, i=index: self._color_changed(i, r, g, b),
            )
            button.pack(side=tk.LEFT, padx=2)
            buttons.append(button)
        self.end_color_button = buttons[1]
        self.end_color_button.set_enabled(bgmode > 0)

    def _bgmode_changed(self, index: int) -> None:
        self._send(self.client.setprop_str, "xlivebg.bgmode", BG_MODES[index])
        self.end_color_button.set_enabled(index > 0)

    def _color_changed(self, index: int, r: int, g: int, b: int) -> None:
        col = self.bgcol[index]
        col[0], col[1], col[2] = r / 65535.0, g / 65535.0, b / 65535.0
        self._send(self.client.setprop_vec, COLOR_PROPERTIES[index], col)

    def _build_fit(self, parent) -> None:
        frame = labeled_frame(parent, "Background image fit")
        frame.pack(fill=tk.X)

        hbox = tk.Frame(frame)
        hbox.pack(fill=tk.X)
        tk.Label(hbox, text="mode").pack(side=tk.LEFT)
        fit_name = self._query(self.client.getprop_str, "xlivebg.fit", None)
        fit = fit_index(fit_name) if fit_name is not None else 0
        option_menu(hbox, FIT_MODE_LABELS, fit, self._fit_changed).pack(side=tk.LEFT)

        self.crop_frame = labeled_frame(frame, "Crop options")
        self.crop_frame.pack(fill=tk.X)
        self.crop_frame.columnconfigure(1, weight=1)

        self.crop_zoom = self._query(self.client.getprop_num, "xlivebg.crop_zoom", 1.0)
        tk.Label(self.crop_frame, text="zoom").grid(row=0, column=0, sticky="e")
        zoom = FloatSlider(self.crop_frame, None, self.crop_zoom, 0, 1, None)
        zoom.configure(showvalue=False)
        zoom.grid(row=0, column=1, sticky="ew")
        self.crop_zoom = zoom.get()
        zoom._command = self._crop_zoom_changed

        vec = self._query(self.client.getprop_vec, "xlivebg.crop_dir", None)
        if vec is not None:
            self.cropdir = list(vec)
        for axis, text in enumerate(("horizontal pan", "vertical pan")):
            row = axis + 1
            tk.Label(self.crop_frame, text=text).grid(row=row, column=0, sticky="e")
            slider = FloatSlider(self.crop_frame, None, self.cropdir[axis], -1, 1, None)
            slider.configure(showvalue=False)
            slider.grid(row=row, column=1, sticky="ew")
            self.cropdir[axis] = slider.get()
            slider._command = lambda value, a=axis: self._crop_dir_changed(a, value)

        if fit != 1:
            _set_enabled(self.crop_frame, False)

    def _fit_changed(self, index: int) -> None:
        _set_enabled(self.crop_frame, index == 1)
        self._send(self.client.setprop_str, "xlivebg.fit", FIT_MODES[index])

    def _crop_zoom_changed(self, value: float) -> None:
        if value == self.crop_zoom:
            return
        self.crop_zoom = value
        self._send(self.client.setprop_num, "xlivebg.crop_zoom", value)

    def _crop_dir_changed(self, axis: int, value: float) -> None:
        if value == self.cropdir[axis]:
            return
        self.cropdir[axis] = value
        self._send(self.client.setprop_vec, "xlivebg.crop_dir", self.cropdir)

    def _build_fps(self, parent) -> None:
        frame = labeled_frame(parent, "Frame rate")
        frame.pack(fill=tk.X)

        self.user_fps = self._query(self.client.getprop_int, "xlivebg.fps", -1)
        self.force_fps = self.user_fps > 0
        checkbox(frame, "Force", self.force_fps, self._force_fps_changed).pack(side=tk.LEFT)

        if not self.force_fps:
            try:
                self.user_fps = fps_from_update_rate(self.client.getupd())
            except (DaemonError, ValueError):
                pass

        tk.Label(frame, text="fps").pack(side=tk.RIGHT)
        self.fps_slider = int_slider(
            frame, None, self.user_fps, 1, max(self.user_fps, 60), self._fps_changed
        )
        self.fps_slider.pack(side=tk.LEFT, fill=tk.X, expand=True)
        _set_enabled(self.fps_slider, self.force_fps)

    def _force_fps_changed(self, checked: bool) -> None:
        self.force_fps = checked
        _set_enabled(self.fps_slider, checked)
        if checked:
            self.fps_slider.set(self.user_fps)
            self._send(self.client.setprop_int, "xlivebg.fps", self.user_fps)
        else:
            self._send(self.client.setprop_int, "xlivebg.fps", -1)

    def _fps_changed(self, value: int) -> None:
        if not self.force_fps or value == self.user_fps:
            return
        self.user_fps = value
        self._send(self.client.setprop_int, "xlivebg.fps", value)

    # --- wallpaper settings ----------------------------------------------

    def rebuild_wallpaper_ui(self) -> None:
        """Rebuild the settings panel for the wallpaper the daemon is showing."""
        bg = self.wallpapers.active()
        if bg is None:
            return

        if self._wallpaper_box is not None:
            self._wallpaper_box.destroy()
        vbox = tk.Frame(self.wallpaper_frame)
        vbox.pack(fill=tk.BOTH, expand=True)
        self._wallpaper_box = vbox

        self.wallpaper_frame.configure(text=f"Wallpaper settings: {bg.name}")

        for prop in bg.props:
            self._add_prop_widget(vbox, prop)

    def _add_prop_widget(self, vbox, prop: BgProp) -> None:
        if prop.type is PropType.BOOL:
            value = self._query(self.client.getprop_int, prop.fullname, None)
            if value is None:
                return
            prop.value = value
            checkbox(vbox, prop.name, value,
                     lambda state, p=prop: self._bool_prop_changed(p, state)).pack(anchor=tk.W)

        elif prop.type is PropType.TEXT:
            if self._query(self.client.getprop_str, prop.fullname, None) is None:
                return
            hbox = tk.Frame(vbox)
            hbox.pack(fill=tk.X)
            tk.Label(hbox, text=prop.name).pack(side=tk.LEFT)
            tk.Entry(hbox).pack(side=tk.LEFT, fill=tk.X, expand=True)

        elif prop.type is PropType.NUMBER:
            value = self._query(self.client.getprop_num, prop.fullname, None)
            if value is None:
                return
            try:
                slider = FloatSlider(vbox, prop.name, value, prop.start, prop.end, None)
            except ValueError:
                tk.Label(vbox, text=_INVALID_RANGE).pack(anchor=tk.W)
                return
            prop.value = slider.get()
            slider._command = lambda v, p=prop: self._num_prop_changed(p, v)
            slider.pack(fill=tk.X)

        elif prop.type is PropType.INTEGER:
            value = self._query(self.client.getprop_int, prop.fullname, None)
            if value is None:
                return
            prop.value = value
            try:
                slider = int_slider(vbox, prop.name, value, int(prop.start), int(prop.end),
                                    lambda v, p=prop: self._int_prop_changed(p, v))
            except ValueError:
                tk.Label(vbox, text=_INVALID_RANGE).pack(anchor=tk.W)
                return
            slider.pack(fill=tk.X)

        elif prop.type is PropType.COLOR:
            vec = self._query(self.client.getprop_vec, prop.fullname, None)
            if vec is None:
                return
            color = tuple(_to16(c) for c in vec[:3])
            prop.value = color
            hbox = tk.Frame(vbox)
            hbox.pack(fill=tk.X)
            tk.Label(hbox, text=prop.name).pack(side=tk.LEFT)
            ColorButton(hbox, PROPCOL_WIDTH, PROPCOL_HEIGHT, color,
                        lambda r, g, b, p=prop: self._color_prop_changed(p, r, g, b)
                        ).pack(side=tk.LEFT)

        elif prop.type in (PropType.PATHNAME, PropType.FILENAME, PropType.DIRNAME):
            text = self._query(self.client.getprop_str, prop.fullname, None)
            if text is None:
                return
            hbox = tk.Frame(vbox)
            hbox.pack(fill=tk.X)
            tk.Label(hbox, text=prop.name).pack(side=tk.LEFT)
            PathField(
                hbox,
                clean_path(text),
                lambda path, p=prop: self._send(self.client.setprop_str, p.fullname, path),
            ).pack(side=tk.LEFT, fill=tk.X, expand=True)

    def _bool_prop_changed(self, prop: BgProp, state: bool) -> None:
        value = int(state)
        if value != prop.value:
            prop.value = value
            self._send(self.client.setprop_int, prop.fullname, value)

    def _num_prop_changed(self, prop: BgProp, value: float) -> None:
        if value != prop.value:
            prop.value = value
            self._send(self.client.setprop_num, prop.fullname, value)

    def _int_prop_changed(self, prop: BgProp, value: int) -> None:
        if value != prop.value:
            prop.value = value
            self._send(self.client.setprop_int, prop.fullname, value)

    def _color_prop_changed(self, prop: BgProp, r: int, g: int, b: int) -> None:
        if (r, g, b) == prop.value:
            return
        prop.value = (r, g, b)
        self._send(self.client.setprop_vec, prop.fullname,
                   (r / 65535.0, g / 65535.0, b / 65535.0, 1.0))

    # --- saving ----------------------------------------------------------

    def save_config(self) -> None:
        """Ask for confirmation, then have the daemon write its configuration."""
        try:
            path = self.client.cfgpath()
        except DaemonError:
            path = None
        if path is not None:
            if not question_box("Are you sure?",
                                f'Saving will overwrite "{path}", are you sure?'):
                return
        self._send(self.client.save)


def main(argv: Sequence[str] | None = None) -> int:
    """Open the configuration window; returns the exit status."""
    parser = argparse.ArgumentParser(description="Configure the live wallpaper daemon.")
    parser.add_argument("--socket", default=DEFAULT_SOCKET_PATH,
                        help="path of the daemon's command socket")
    args = parser.parse_args(argv)

    try:
        root = tk.Tk()
    except tk.TclError:
        print("failed to initialize ui", file=sys.stderr)
        return 1
    root.title("Wallpaper configuration")

    client = Client(args.socket)
    try:
        client.ping()
    except DaemonError:
        message_box("error", "Fatal error",
                    "No response from the wallpaper daemon. Make sure it's running!")
        root.destroy()
        return 1

    try:
        ConfigApp(root, client)
    except DaemonError as exc:
        print(f"Failed to retrieve wallpaper list: {exc}", file=sys.stderr)
        root.destroy()
        return 1

    root.mainloop()
    return 0