'''This module implements a min-heap priority queue on top of python lists.'''

from copy import copy

class MinHeapPriorityQueue(object):
    '''Priority queue backed by a text-book binary min-heap.

       Items must be mutually orderable with `<'. The smallest item is always
       at position 0. Emptiness is signalled by returning None, never by
       raising.
    '''

    def __init__(self, *args):
        '''Initialize the queue.

           Optionally the initial content of the queue can be passed.
        '''

        self._items = []

        for item in args:
            self.insert(item)

    def __repr__(self):
        return 'MinHeapPriorityQueue(*%s)' % repr(self._items)

    def __contains__(self, item):
        return item in self._items

    def __copy__(self):
        cp = MinHeapPriorityQueue()
        cp._items = copy(self._items)

        return cp

    def __iter__(self):
        cp = copy(self)

        while not cp.is_empty():
            yield cp.extract_min()

    def _parent(self, pos):
        '''Get a parent's position given the position of a child'''
        return (pos - 1) // 2

    def _left(self, pos):
        '''Get the left child position'''
        return 2 * pos + 1

    def _right(self, pos):
        '''Get the right child position'''
        return 2 * pos + 2

    def _less(self, i, j):
        '''Check if the element at `i' orders strictly before the one at `j'.'''
        return self._items[i] < self._items[j]

    def _swap(self, i, j):
        '''Swap the elements at positions `i' and `j'.'''
        self._items[i], self._items[j] = self._items[j], self._items[i]

    def _siftup(self, pos):
        '''Given a heap where the element at the position `pos' may be violating the
        heap property, move it up the tree until the heap property is restored.
        '''

        while pos > 0:
            parent = self._parent(pos)
            if not self._less(pos, parent):
                break

            self._swap(parent, pos)
            pos = parent

    def _siftdown(self, pos):
        '''Given a heap where the element at the position `pos' may be violating the
        heap property, move it down the tree until the heap property is restored.
        '''
        size = self.size()
        while True:
            left = self._left(pos)
            right = self._right(pos)

            if left >= size:
                break

            smallest = left
            if right < size and self._less(right, left):
                smallest = right

            if not self._less(smallest, pos):
                break

            self._swap(pos, smallest)
            pos = smallest

    def is_empty(self):
        '''Check if the queue is empty.'''
        return self.size() == 0

    def size(self):
        '''Get the number of elements in the queue.'''
        return len(self._items)

    def min(self):
        '''Peek at the minimal element of the queue.
        If queue is empty, return None.
        '''
        if self.is_empty():
            return None

        return self._items[0]

    def insert(self, item):
        '''Add `item' to the queue and return the queue itself.
        None is rejected since it is the value `extract_min' uses for "empty".
        '''
        if item is None:
            raise ValueError('None cannot be stored in the queue')

        self._items.append(item)
        self._siftup(self.size() - 1)

        return self

    def extract_min(self):
        '''Remove and return the minimal element from the queue.
        If queue is empty, return None and leave it untouched.
        '''
        if self.is_empty():
            return None

        last = self._items.pop()
        if self.is_empty():
            return last

        min = self._items[0]
        self._items[0] = last
        self._siftdown(0)

        return min
