# -*- coding: utf-8 -*-
"""
Explicit change notification between market data objects and the objects derived from them.

An Observable (e.g. a volatility surface, an index or the global evaluation date) keeps the set of
its observers and calls their update() method when it changes. An Observer (e.g. an optionlet
stripper) registers with each object it depends on and typically just marks itself as stale in
update(), recomputing lazily on the next read.

Observables hold their observers weakly. An observer which is no longer referenced elsewhere is
dropped from the observables it registered with and is not notified again.
"""
import logging
import weakref


logger = logging.getLogger(__name__)


class Observable:

    def __init__(self):
        self._observers = weakref.WeakSet()

    @property
    def observers(self) -> set:
        return set(self._observers)

    def register_observer(self, observer: 'Observer'):
        self._observers.add(observer)

    def unregister_observer(self, observer: 'Observer'):
        self._observers.discard(observer)

    def notify_observers(self):
        logger.debug(f"{type(self).__name__} notifying {len(self._observers)} observer(s)")
        for observer in list(self._observers):
            observer.update()


class Observer:

    def __init__(self):
        self._observables = set()

    def register_with(self, observable: Observable):
        observable.register_observer(self)
        self._observables.add(observable)

    def unregister_with(self, observable: Observable):
        observable.unregister_observer(self)
        self._observables.discard(observable)

    def unregister_with_all(self):
        for observable in list(self._observables):
            self.unregister_with(observable)

    def update(self):
        raise NotImplementedError


class ObservableObserver(Observable, Observer):
    """Forwards notifications of the objects it depends on to its own observers."""

    def __init__(self):
        Observable.__init__(self)
        Observer.__init__(self)

    def update(self):
        self.notify_observers()
