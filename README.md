# livebgconf

A Tk configuration window for a live wallpaper daemon, and a small Python
library for talking to that daemon over its UNIX domain socket
(`/tmp/xlivebg.sock` by default).

The daemon keeps a set of named properties (`xlivebg.active`,
`xlivebg.image`, `xlivebg.fit`, `xlivebg.fps`, per-wallpaper settings such as
`xlivebg.<wallpaper>.<property>`, and so on). This package reads and changes
them, lists the installed wallpapers with their tunable parameters, and asks
the daemon to save its configuration.

## Installing

```
pip install .
```

The window uses Tk (`tkinter`), which ships with most Python installations.
There are no other dependencies.

## The configuration window

With the wallpaper daemon running, start:

```
livebgconf
```

or, to use a different socket:

```
livebgconf --socket /path/to/socket
```

The left side holds the global settings:

- the list of wallpapers; selecting one switches the daemon to it;
- the background image and animation mask paths (typed in, or picked with
  the `...` button; `x` clears the field);
- the background colour mode (solid, vertical or horizontal gradient) and
  its two colours, chosen with a built-in HSV/RGB colour picker;
- how the image is fitted (full, crop or stretch), with zoom and pan sliders
  that are active only in crop mode;
- a frame rate that can be forced; when not forced, the slider shows the
  rate derived from the daemon's update interval.

The right side is rebuilt for the active wallpaper from the property list it
publishes: checkboxes for booleans, sliders for numbers and integers, colour
buttons for colours and path fields for file, directory and path names.
Every change is sent to the daemon immediately. "Save configuration" (also
File > Save or Ctrl-S) shows the config file path the daemon reports, asks
for confirmation, and then has the daemon write it. File > Quit or Ctrl-Q
closes the window.

If the daemon does not answer, the tool shows an error and exits with
status 1.

## Using the library

```python
from livebgconf.cmd import Client, DaemonError
from livebgconf.bg import WallpaperList

client = Client()            # or Client("/path/to/socket")
client.ping()

wallpapers = WallpaperList(client)
wallpapers.refresh()         # fetch the list and each property list
for bg in wallpapers:
    print(bg.name, "-", bg.desc)
    for prop in bg.props:
        print("   ", prop.fullname, prop.type.name, prop.start, prop.end)

current = wallpapers.active()     # BgInfo or None
wallpapers.switch("minimal")

client.setprop_num("xlivebg.minimal.speed", 2.5)
print(client.getprop_vec("xlivebg.color"))   # always four floats

try:
    client.save()
except DaemonError as exc:
    print("save failed:", exc)
```

`Client` offers `ping`, `save`, `cfgpath`, `list`, `proplist`,
`getprop_str`/`_int`/`_num`/`_vec`, `setprop_str`/`_int`/`_num`/`_vec`,
`rmprop` and `getupd` (update interval in microseconds). Every request opens
a fresh connection; a daemon that cannot be reached or that rejects a
request raises `DaemonError`.

Text formats can be parsed without a daemon:

- `livebgconf.bg.parse_wallpaper_list(text)` turns `name:description` lines
  into `BgInfo` objects;
- `livebgconf.bg.parse_proplist(bgname, text)` turns a `proplist { prop { ... } }`
  document into `BgProp` objects, skipping properties with a missing id or
  an unknown type and raising `ValueError` for malformed text;
- `livebgconf.bg.prop_type(name)` maps a type name to `PropType`.

`livebgconf.colors` provides `rgb_to_hsv` and `hsv_to_rgb` with all
components in [0, 1].

## What it does not do

- It does not draw wallpapers: it only configures a daemon that must already
  be running and listening on the socket.
- Text properties get an entry box in the wallpaper panel, but its contents
  are neither filled from nor sent to the daemon, and multi-line text is not
  handled.
- The frame-rate slider is shown without a live preview; wallpaper changes
  take effect only in the daemon.

## Running the tests

```
pip install .[test]
pytest
```