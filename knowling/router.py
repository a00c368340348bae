"""
Contains the application's route table and the ``Router`` which keeps the navigation history.
"""

from __future__ import annotations

import logging
import re
from typing import Dict, List


class Route:
    """
    A named location in the application. Path segments starting with ``:`` are parameters, e.g. ``/edit/:id``.
    """

    def __init__(self, name: str, path: str):
        self.name: str = name
        self.path: str = path
        self.params: List[str] = re.findall(r':(\w+)', path)
        self._pattern = re.compile('^' + re.sub(r':(\w+)', r'(?P<\1>[^/]+)', path) + '$')

    def build(self, params: Dict[str, str] | None = None) -> str:
        """
        Build the path for this route.

        :param params: values for the route parameters.
        :return: the path, e.g. ``/edit/a1b2c3``.
        :raises ValueError: if a route parameter is missing.
        """
        params = params or {}
        missing = [p for p in self.params if not params.get(p)]
        if missing:
            raise ValueError('Route {0} requires parameter(s) {1}'.format(self.name, ', '.join(missing)))
        return re.sub(r':(\w+)', lambda m: str(params[m.group(1)]), self.path)

    def match(self, path: str) -> Dict[str, str] | None:
        found = self._pattern.match(path)
        return found.groupdict() if found else None

    def __str__(self):
        return self.name


#: Routes of the application, in matching order.
ROUTES: List[Route] = [
    Route('Home', '/'),
    Route('AddNote', '/note'),
    Route('EditNote', '/edit/:id'),
    Route('Admin', '/admin'),
]


class Router:
    """
    Keeps track of where the user is. The first entry of the history is always ``Home``.
    """

    def __init__(self, routes: List[Route] = None):
        if routes is None:
            routes = ROUTES
        self.routes: Dict[str, Route] = {route.name: route for route in routes}
        self.history: List[str] = [self.routes['Home'].build()] if 'Home' in self.routes else []

    @property
    def current(self) -> str | None:
        return self.history[-1] if self.history else None

    def push(self, name: str, params: Dict[str, str] | None = None) -> str:
        """
        Navigate to a named route.

        :param name: the route name, e.g. ``EditNote``.
        :param params: values for the route parameters.

        :return: the path navigated to.
        :raises ValueError: if the route does not exist or a parameter is missing.
        """
        if name not in self.routes:
            raise ValueError('Unknown route {}'.format(name))
        path = self.routes[name].build(params)
        self.history.append(path)
        logging.debug('Navigated to {}'.format(path))
        return path

    def back(self) -> str | None:
        if len(self.history) > 1:
            self.history.pop()
        return self.current

    def resolve(self, path: str) -> tuple[Route, Dict[str, str]] | tuple[None, dict]:
        """
        Find the route matching a path.

        :param path: the path to resolve.

        :returns:

            -route (:py:class:`Route` | None) - the matching route, or None if no route matches.

            -params (:py:class:`dict`) - the route parameters found in the path.

        """
        for route in self.routes.values():
            params = route.match(path)
            if params is not None:
                return route, params
        return None, {}
