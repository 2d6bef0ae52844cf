import numpy as np


class ArraySource:
    """In-memory stand-in for VideoSource backed by a list of RGB frames."""

    def __init__(self, frames, fps=1.0, fail_at=None):
        self.frames = list(frames)
        self.fps = float(fps)
        self.position = 0.0
        self.fail_at = fail_at
        self.seeks = []

    @property
    def duration(self):
        return len(self.frames) / self.fps

    @property
    def size(self):
        h, w = self.frames[0].shape[:2]
        return w, h

    def seek(self, t):
        self.position = min(max(0.0, t), self.duration)
        self.seeks.append(self.position)

    def read(self):
        index = min(int(round(self.position * self.fps)), len(self.frames) - 1)
        if self.fail_at is not None and index >= self.fail_at:
            return None
        return self.frames[index]


def solid_frame(width, height, color):
    return np.full((height, width, 3), color, dtype=np.uint8)
