# src/dragdrop/snippets.py
"""
JavaScript run inside the page through `execute_script`.

Synthetic drag events never carry a usable `dataTransfer`, so page code under
test has to guard every access, e.g.:

    if (event.dataTransfer) { event.dataTransfer.dropEffect = 'move'; }

Arguments arrive as `arguments[n]`; locations are plain {x, y} page coordinates.
"""

# arguments: element, location -> bool (draggable flag)
DRAGSTART_IF_DRAGGABLE = """
var element = arguments[0], location = arguments[1];
var event = new Event('dragstart', {bubbles: true});
event.pageX = location.x;
event.pageY = location.y;
if (element.draggable) {
    element.dispatchEvent(event);
}
return !!element.draggable;
"""

# arguments: element, location
DRAG = """
var element = arguments[0], location = arguments[1];
var event = new Event('drag', {bubbles: true});
event.pageX = location.x;
event.pageY = location.y;
element.dispatchEvent(event);
"""

# arguments: element, location -> bool (drop accepted)
# `defaultPrevented` stays false on untrusted events, so preventDefault is stubbed.
DRAGOVER_ACCEPTS_DROP = """
var element = arguments[0], location = arguments[1];
var event = new Event('dragover', {bubbles: true});
var ableToDrop = false;
var originalPreventDefault = event.preventDefault;
event.preventDefault = function () {
    ableToDrop = true;
    originalPreventDefault.call(this);
};
event.pageX = location.x;
event.pageY = location.y;
element.dispatchEvent(event);
return ableToDrop;
"""

# arguments: element, location
DROP = """
var element = arguments[0], location = arguments[1];
var event = new Event('drop', {bubbles: true});
event.pageX = location.x;
event.pageY = location.y;
element.dispatchEvent(event);
"""

# arguments: element, location
DRAGEND = """
var element = arguments[0], location = arguments[1];
var event = new Event('dragend', {bubbles: true});
event.pageX = location.x;
event.pageY = location.y;
element.dispatchEvent(event);
"""

# arguments: page location -> element or null
ELEMENT_AT_POINT = """
var point = arguments[0];
return document.elementFromPoint(
    point.x - window.pageXOffset,
    point.y - window.pageYOffset
);
"""

# -> {x, y} current document scroll
SCROLL_OFFSET = """
return {x: window.pageXOffset, y: window.pageYOffset};
"""
