import unittest

from ecpsi.errors import InvalidBlindedPointsError, PsiError
from ecpsi.messages import (BlindedPointsMessage, DoubleBlindedPointsMessage,
                            IntersectionResult)


class MessageTest(unittest.TestCase):

    def test_blinded_points_message(self):
        points = [bytes(33)]
        msg = BlindedPointsMessage(points)
        self.assertEqual(msg.blinded_points, (bytes(33),))
        self.assertEqual(len(msg), 1)
        self.assertTrue(msg)

    def test_empty_message(self):
        msg = BlindedPointsMessage(())
        self.assertEqual(len(msg), 0)
        self.assertFalse(msg)

    def test_validated(self):
        msg = BlindedPointsMessage.validated([bytes(33)])
        self.assertEqual(list(msg), [bytes(33)])

    def test_validated_empty(self):
        with self.assertRaises(InvalidBlindedPointsError) as cm:
            BlindedPointsMessage.validated([])
        self.assertEqual(str(cm.exception),
                         "Invalid blinded points: Blinded points vector cannot be empty")
        self.assertIsInstance(cm.exception, PsiError)

    def test_double_blinded_message(self):
        msg = DoubleBlindedPointsMessage([b"\x02" * 33, b"\x03" * 33])
        self.assertEqual(len(msg), 2)
        self.assertEqual(msg, DoubleBlindedPointsMessage((b"\x02" * 33, b"\x03" * 33)))

    def test_messages_are_immutable(self):
        msg = BlindedPointsMessage(())
        with self.assertRaises(AttributeError):
            msg.blinded_points = (bytes(33),)


class IntersectionResultTest(unittest.TestCase):

    def test_result(self):
        digest = bytes([1]) * 32
        result = IntersectionResult(frozenset([digest]), {digest: bytes(33)})
        self.assertEqual(len(result), 1)
        self.assertIn(digest, result)
        self.assertEqual(result.double_blinded_map[digest], bytes(33))

    def test_empty_result(self):
        result = IntersectionResult()
        self.assertEqual(len(result), 0)
        self.assertFalse(result)
        self.assertEqual(result.double_blinded_map, {})

    def test_ordered(self):
        a, b, c = bytes([1]) * 32, bytes([2]) * 32, bytes([3]) * 32
        result = IntersectionResult(frozenset([a, c]))
        self.assertEqual(result.ordered([c, b, a]), [c, a])


if __name__ == "__main__":
    unittest.main()
