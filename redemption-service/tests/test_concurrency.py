import threading
import unittest

from redemption.models import Redemption, Vendor
from tests.support import FileDatabaseTestCase, make_proof

WORKERS = 6


class TestConcurrentRequests(FileDatabaseTestCase):
    def run_simultaneously(self, path, body):
        barrier = threading.Barrier(WORKERS)
        results = []
        lock = threading.Lock()

        def worker():
            client = self.app.test_client()
            barrier.wait()
            resp = client.post(path, json=body)
            with lock:
                results.append((resp.status_code, resp.get_json()))

        threads = [threading.Thread(target=worker) for _ in range(WORKERS)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=60)
        self.assertEqual(len(results), WORKERS)
        return results

    def test_simultaneous_logins_create_one_vendor(self):
        results = self.run_simultaneously('/api/vendors/login', {'proof': make_proof('0xnewvendor')})

        statuses = [data['status'] for _, data in results]
        self.assertLessEqual(statuses.count('registered'), 1)
        self.assertEqual(len({data['vendorId'] for _, data in results}), 1)
        self.assertTrue(all(code in (200, 201) for code, _ in results))
        self.assertEqual(self.count(Vendor, identity_hash='0xnewvendor'), 1)

    def test_simultaneous_redemptions_succeed_once(self):
        campaign = self.create_campaign(name='Rush')

        results = self.run_simultaneously('/api/redeem', {
            'proof': make_proof('0xreplayed'), 'campaignId': campaign['id']
        })

        codes = sorted(code for code, _ in results)
        self.assertEqual(codes, [201] + [400] * (WORKERS - 1))
        for code, data in results:
            if code == 400:
                self.assertEqual(data['error_code'], 'ALREADY_REDEEMED')
        self.assertEqual(self.count(Redemption, identity_hash='0xreplayed'), 1)


if __name__ == '__main__':
    unittest.main()
