"""Figures that a scene is made of: rectangles, circles, grids, lines, polygons, text and messages."""