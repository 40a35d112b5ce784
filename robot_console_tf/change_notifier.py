#!/usr/bin/env python3
import itertools
from typing import Callable, Dict

TransformChangeCallback = Callable[[], None]


class ChangeNotifier:
  """
  Fans a "the graph changed" signal out to subscribers. No payload: subscribers
  re-query whatever transforms they care about.
  """
  def __init__(self):
    self._callbacks: Dict[int, TransformChangeCallback] = {}
    self._tokens = itertools.count()

  def __len__(self):
    return len(self._callbacks)

  def subscribe(self, callback: TransformChangeCallback) -> Callable[[], None]:
    """Register callback; returns an unsubscribe handle that may be called any number of times."""
    if not callable(callback):
      raise TypeError("callback must be callable")
    token = next(self._tokens)
    self._callbacks[token] = callback

    def unsubscribe():
      self._callbacks.pop(token, None)

    return unsubscribe

  def notify(self) -> None:
    # Snapshot so callbacks may (un)subscribe while we iterate
    for token, callback in list(self._callbacks.items()):
      if token not in self._callbacks:
        continue
      callback()
