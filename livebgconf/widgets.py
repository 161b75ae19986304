"""Tk widget helpers, dialogs and the colour picker used by the configuration tool."""

from __future__ import annotations

import tkinter as tk
from tkinter import filedialog, messagebox
from typing import Callable, Sequence

from livebgconf.colors import hsv_to_rgb, rgb_to_hsv

CBOX_WIDTH = 180
CBOX_HEIGHT = 180
HUEBAR_WIDTH = 32
HUEBAR_HEIGHT = CBOX_HEIGHT
COLSEL_HEIGHT = 32
COLOR_WIDGET_WIDTH = CBOX_WIDTH + HUEBAR_WIDTH
COLOR_WIDGET_HEIGHT = CBOX_HEIGHT + COLSEL_HEIGHT

_H_THRES = 1.0 / HUEBAR_HEIGHT
_S_THRES = 1.0 / CBOX_WIDTH
_V_THRES = 1.0 / CBOX_HEIGHT
_HUEBAR_MARGIN = 5
_PATH_BUF_SIZE = 512
_DISABLED_GRAY = 32768

Color16 = tuple[int, int, int]


def slider_decimals(lo: float, hi: float) -> int:
    """Number of decimal places a slider over [lo, hi] needs for 100 steps."""
    delta = hi - lo
    if delta <= 1e-6:
        raise ValueError(f"invalid slider range: [{lo}, {hi}]")
    decimals = 0
    while delta < 100.0:
        delta *= 10.0
        decimals += 1
    return decimals


def _quantize(value: float, decimals: int) -> float:
    """Truncate a value to the given number of decimal places."""
    scale = 10 ** decimals
    return int(value * scale) / scale


def _initial_dir(path: str) -> str | None:
    """Directory part of a path for the file dialog, or None if there is none."""
    text = path[: _PATH_BUF_SIZE - 1]
    slash = text.rfind("/")
    if slash >= 0:
        text = text[:slash]
    return text or None


def _clamp16(value: float) -> int:
    return min(max(int(value), 0), 0xFFFF)


def _hex_color(color: Sequence[float]) -> str:
    """Tk colour string for a 16-bit per channel RGB triple."""
    r, g, b = (_clamp16(c) for c in color)
    return f"#{r:04x}{g:04x}{b:04x}"


def _pack_rgb(rgb: Sequence[float]) -> int:
    """Pack an RGB triple in [0, 1] into a 24-bit pixel value."""
    r, g, b = (min(max(int(c * 255.0), 0), 255) for c in rgb)
    return (r << 16) | (g << 8) | b


def _colorbox_pixels(hsv: Sequence[float], background: int) -> list[list[int]]:
    """Pixels of the saturation/value box and hue bar for a selected HSV colour."""
    sel_h, sel_s, sel_v = hsv
    rows = []
    for i in range(CBOX_HEIGHT):
        v = 1.0 - i / CBOX_HEIGHT
        on_v = abs(v - sel_v) <= _V_THRES
        row = []
        for j in range(CBOX_WIDTH):
            s = j / CBOX_WIDTH
            pixel = _pack_rgb(hsv_to_rgb(sel_h, s, v))
            if on_v or abs(s - sel_s) <= _S_THRES:
                pixel ^= 0xFFFFFF
            row.append(pixel)

        h = 1.0 - i / HUEBAR_HEIGHT
        hue = _pack_rgb(hsv_to_rgb(h, 1.0, 1.0))
        if abs(h - sel_h) <= _H_THRES:
            hue ^= 0xFFFFFF
        row.extend([background] * _HUEBAR_MARGIN)
        row.extend([hue] * (HUEBAR_WIDTH - _HUEBAR_MARGIN))
        rows.append(row)
    return rows


def labeled_frame(parent, title: str) -> tk.LabelFrame:
    """A frame with a title label."""
    return tk.LabelFrame(parent, text=title)


def option_menu(parent, options, selected=0, command=None) -> tk.OptionMenu:
    """Option menu over ``options``; ``command`` receives the chosen index."""
    labels = list(options)
    if not 0 <= selected < len(labels):
        raise IndexError(f"option index out of range: {selected}")
    variable = tk.StringVar(parent, value=labels[selected])
    widget = tk.OptionMenu(parent, variable, *labels)
    menu = widget["menu"]
    menu.delete(0, "end")

    def choose(index: int, label: str) -> None:
        variable.set(label)
        if command:
            command(index)

    for index, label in enumerate(labels):
        menu.add_command(label=label, command=lambda i=index, s=label: choose(i, s))
    widget.variable = variable
    return widget


def checkbox(parent, text: str, checked, command=None) -> tk.Checkbutton:
    """A check button; ``command`` receives the new state as a bool."""
    variable = tk.BooleanVar(parent, value=bool(checked))

    def toggled() -> None:
        if command:
            command(variable.get())

    widget = tk.Checkbutton(parent, text=text, variable=variable, command=toggled)
    widget.variable = variable
    return widget


def int_slider(parent, text, value, lo, hi, command=None) -> tk.Scale:
    """Horizontal integer slider; ``command`` receives the new value."""
    if hi <= lo:
        raise ValueError(f"invalid slider range: [{lo}, {hi}]")
    scale = tk.Scale(
        parent,
        from_=lo,
        to=hi,
        resolution=1,
        orient=tk.HORIZONTAL,
        showvalue=True,
        label=text or "",
    )
    scale.set(int(value))
    if command:
        scale.configure(command=lambda text_value: command(int(float(text_value))))
    return scale


class FloatSlider(tk.Scale):
    """Horizontal slider over a real range with 100 or more steps."""

    def __init__(self, parent, text, value, lo, hi, command=None):
        self.decimals = slider_decimals(lo, hi)
        self._scale = 10 ** self.decimals
        super().__init__(
            parent,
            from_=_quantize(lo, self.decimals),
            to=_quantize(hi, self.decimals),
            resolution=1.0 / self._scale,
            orient=tk.HORIZONTAL,
            showvalue=True,
            label=text or "",
        )
        self.set(value)
        self._command = command
        self.configure(command=self._changed)

    def _changed(self, _text: str) -> None:
        if self._command:
            self._command(self.get())

    def get(self) -> float:
        """Current value of the slider."""
        return round(float(super().get()) * self._scale) / self._scale

    def set(self, value) -> None:
        """Move the slider to ``value``, truncated to the slider's precision."""
        super().set(_quantize(float(value), self.decimals))


class PathField(tk.Frame):
    """Editable path entry with browse and clear buttons."""

    def __init__(self, parent, path=None, command=None):
        super().__init__(parent)
        self.variable = tk.StringVar(self, value=path or "")
        self.entry = tk.Entry(self, textvariable=self.variable, width=40)
        self.entry.pack(side=tk.LEFT, fill=tk.X, expand=True)
        tk.Button(self, text="...", command=self.browse).pack(side=tk.LEFT)
        tk.Button(self, text="x", command=self.clear).pack(side=tk.LEFT)
        self._command = command
        self.variable.trace_add("write", self._modified)

    @property
    def path(self) -> str:
        return self.variable.get()

    def _modified(self, *_args) -> None:
        if self._command:
            self._command(self.variable.get())

    def browse(self) -> None:
        """Pick a file with a dialog, starting in the current path's directory."""
        options = {"parent": self}
        initial = _initial_dir(self.variable.get())
        if initial:
            options["initialdir"] = initial
        chosen = filedialog.askopenfilename(**options)
        if chosen:
            self.variable.set(chosen)

    def clear(self) -> None:
        """Empty the path."""
        self.variable.set("")


class ColorButton(tk.Canvas):
    """A button showing a colour; clicking it opens the colour picker."""

    def __init__(self, parent, width, height, color, command=None):
        self.border = 2
        super().__init__(
            parent,
            width=width,
            height=height,
            borderwidth=self.border,
            relief=tk.RAISED,
            highlightthickness=0,
        )
        self.swatch_width = width
        self.swatch_height = height
        self.color: Color16 = tuple(_clamp16(c) for c in color)
        self.enabled = True
        self._command = command
        self.bind("<Button-1>", self._activate)
        self.bind("<Configure>", lambda _event: self._redraw())
        self._redraw()

    def _activate(self, _event=None) -> None:
        if not self.enabled:
            return
        chosen = color_picker_dialog(self, self.color)
        if chosen is None:
            return
        self.color = chosen
        if self._command:
            self._command(*chosen)
        self._redraw()

    def set_enabled(self, enabled) -> None:
        """Enable or grey out the button."""
        self.enabled = bool(enabled)
        self._redraw()

    def _redraw(self) -> None:
        self.delete("all")
        x0 = y0 = self.border
        x1 = x0 + self.swatch_width
        y1 = y0 + self.swatch_height
        if self.enabled:
            fill = _hex_color(self.color)
            self.create_rectangle(x0, y0, x1, y1, fill=fill, outline=fill)
            return
        gray = _hex_color((_DISABLED_GRAY,) * 3)
        self.create_rectangle(x0, y0, x1, y1, fill=gray, outline=gray)
        w, h = self.swatch_width, self.swatch_height
        self.create_line(5, 5, w - 5, h - 5, fill="black", width=5)
        self.create_line(5, h - 5, w - 5, 5, fill="black", width=5)


def message_box(kind: str, title: str, message: str) -> None:
    """Show a modal message; ``kind`` "error" shows an error, anything else information."""
    if kind == "error":
        messagebox.showerror(title, message)
    else:
        messagebox.showinfo(title, message)


def question_box(title: str, message: str) -> bool:
    """Ask an OK/Cancel question; True if the user pressed OK."""
    return bool(messagebox.askokcancel(title, message))


class _ColorPicker:
    def __init__(self, parent, color: Color16):
        self.accepted = False
        self.top = tk.Toplevel(parent)
        self.top.title("Color")
        r, g, b = color
        self.hsv = list(rgb_to_hsv(r / 65535.0, g / 65535.0, b / 65535.0))

        body = tk.Frame(self.top)
        body.pack(fill=tk.BOTH, expand=True)

        self.canvas = tk.Canvas(
            body,
            width=COLOR_WIDGET_WIDTH,
            height=COLOR_WIDGET_HEIGHT,
            highlightthickness=0,
        )
        self.canvas.grid(row=0, column=0, rowspan=3, sticky="nw")
        self.background = _pack_rgb(
            c / 65535.0 for c in self.canvas.winfo_rgb(self.canvas.cget("background"))
        )
        self.image = tk.PhotoImage(master=self.top, width=COLOR_WIDGET_WIDTH, height=CBOX_HEIGHT)
        self.canvas.create_image(0, 0, anchor=tk.NW, image=self.image)

        label = self.canvas.create_text(
            0, (CBOX_HEIGHT + 5 + COLOR_WIDGET_HEIGHT) // 2, anchor=tk.W, text="Color:"
        )
        bbox = self.canvas.bbox(label)
        label_width = bbox[2] - bbox[0] if bbox else 0
        x0 = label_width * 3 // 2
        self.swatch = self.canvas.create_rectangle(
            x0,
            CBOX_HEIGHT + 5,
            x0 + COLOR_WIDGET_WIDTH // 3,
            COLOR_WIDGET_HEIGHT,
        )

        self.sliders = []
        for row, (name, channel) in enumerate(zip(("Red", "Green", "Blue"), color)):
            slider = tk.Scale(body, label=name, from_=0, to=255, orient=tk.HORIZONTAL)
            slider.set(int(channel) * 255 // 65535)
            slider.grid(row=row, column=1, sticky="ew")
            self.sliders.append(slider)
        for slider in self.sliders:
            slider.configure(command=self._slider_changed)

        buttons = tk.Frame(self.top)
        buttons.pack(fill=tk.X)
        tk.Button(buttons, text="OK", command=self._ok).pack(side=tk.LEFT, expand=True)
        tk.Button(buttons, text="Cancel", command=self.top.destroy).pack(
            side=tk.LEFT, expand=True
        )

        for sequence in ("<Button-1>", "<B1-Motion>", "<ButtonRelease-1>"):
            self.canvas.bind(sequence, self._mouse)

        self._refresh()

    def _ok(self) -> None:
        self.accepted = True
        self.top.destroy()

    def _current_rgb8(self) -> list[int]:
        return [int(c * 255.0) for c in hsv_to_rgb(*self.hsv)]

    def _refresh(self) -> None:
        rows = _colorbox_pixels(self.hsv, self.background)
        data = " ".join("{" + " ".join(f"#{p:06x}" for p in row) + "}" for row in rows)
        self.image.put(data, to=(0, 0))
        fill = _hex_color([c * 65535.0 for c in hsv_to_rgb(*self.hsv)])
        self.canvas.itemconfigure(self.swatch, fill=fill, outline=fill)

    def _mouse(self, event) -> None:
        x, y = event.x, event.y
        if not (0 <= x < COLOR_WIDGET_WIDTH and 0 <= y < CBOX_HEIGHT):
            return
        if x < CBOX_WIDTH:
            self.hsv[1] = x / CBOX_WIDTH
            self.hsv[2] = 1.0 - y / CBOX_HEIGHT
        else:
            self.hsv[0] = 1.0 - y / HUEBAR_HEIGHT
        self._refresh()
        for slider, value in zip(self.sliders, self._current_rgb8()):
            slider.set(value)

    def _slider_changed(self, _value) -> None:
        values = [int(slider.get()) for slider in self.sliders]
        if values == self._current_rgb8():
            return
        self.hsv = list(rgb_to_hsv(*(v / 255.0 for v in values)))
        self._refresh()

    def run(self) -> Color16 | None:
        self.top.transient(self.top.master)
        self.top.grab_set()
        self.top.wait_window()
        if not self.accepted:
            return None
        return tuple(int(c * 65535.0) for c in hsv_to_rgb(*self.hsv))


def color_picker_dialog(parent, color=None) -> Color16 | None:
    """Let the user pick a colour; returns 16-bit RGB, or None if cancelled."""
    start = tuple(_clamp16(c) for c in color) if color is not None else (0, 0, 0)
    return _ColorPicker(parent, start).run()