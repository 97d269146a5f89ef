import threading
import time

from django.test import SimpleTestCase

from core.locks import KeyedLock


class KeyedLockTests(SimpleTestCase):
    def test_same_key_is_mutually_exclusive(self):
        locks = KeyedLock()
        inside = []
        overlaps = []

        def worker():
            with locks.hold("employee-1"):
                if inside:
                    overlaps.append(True)
                inside.append(True)
                time.sleep(0.02)
                inside.pop()

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        self.assertEqual(overlaps, [])

    def test_different_keys_do_not_block_each_other(self):
        locks = KeyedLock()
        entered = threading.Event()

        def other_key():
            with locks.hold("employee-2"):
                entered.set()

        with locks.hold("employee-1"):
            t = threading.Thread(target=other_key)
            t.start()
            self.assertTrue(entered.wait(timeout=2))
            t.join()

    def test_entries_are_released_after_use(self):
        locks = KeyedLock()
        with locks.hold("employee-1"):
            self.assertEqual(len(locks), 1)
        self.assertEqual(len(locks), 0)

    def test_none_key_needs_no_lock(self):
        locks = KeyedLock()
        with locks.hold(None):
            self.assertEqual(len(locks), 0)

    def test_lock_released_when_block_raises(self):
        locks = KeyedLock()
        with self.assertRaises(ValueError):
            with locks.hold("employee-1"):
                raise ValueError("boom")
        self.assertEqual(len(locks), 0)
        with locks.hold("employee-1"):
            pass
