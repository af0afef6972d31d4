import os
import shutil
import tempfile
import unittest

from redemption.app import create_app
from redemption.extensions import db
from redemption.services.verifier import VerificationResult

JWT_TEST_SECRET = 'test-secret-key-that-is-long-enough-for-hs256'


def make_proof(nullifier, proof='0xvalidproof'):
    return {
        'merkle_root': '0x1f38b57f3bdf96f05ea62fa68814871bf0ca8ce4dbe073d8497d5a6b0a53e5e0',
        'nullifier_hash': nullifier,
        'proof': proof,
        'verification_level': 'orb'
    }


class FakeVerifier:
    """Stands in for World ID: any proof passes unless its proof string is 'invalid'."""

    def __init__(self):
        self.calls = []
        self.error = None

    def verify(self, action, proof):
        self.calls.append((action, dict(proof)))
        if self.error is not None:
            raise self.error
        if proof['proof'] == 'invalid':
            return VerificationResult(ok=False, detail='invalid_proof')
        return VerificationResult(ok=True, identity_hash=proof['nullifier_hash'])


class AppTestCase(unittest.TestCase):
    engine_options = None

    def database_uri(self):
        return 'sqlite://'

    def setUp(self):
        self.verifier = FakeVerifier()
        test_config = {
            'TESTING': True,
            'SQLALCHEMY_DATABASE_URI': self.database_uri(),
            'JWT_SECRET_KEY': JWT_TEST_SECRET,
            'AUTO_CREATE_TABLES': True
        }
        if self.engine_options is not None:
            test_config['SQLALCHEMY_ENGINE_OPTIONS'] = self.engine_options
        self.app = create_app(test_config, verifier=self.verifier)
        self.client = self.app.test_client()

    def tearDown(self):
        with self.app.app_context():
            db.session.remove()
            db.drop_all()
            db.engine.dispose()

    # Helpers

    def create_campaign(self, **fields):
        body = {'name': 'Spring'}
        body.update(fields)
        resp = self.client.post('/api/campaigns', json=body)
        self.assertEqual(resp.status_code, 201, resp.get_json())
        return resp.get_json()

    def create_item(self, campaign_id, name):
        resp = self.client.post('/api/items', json={'campaignId': campaign_id, 'name': name})
        self.assertEqual(resp.status_code, 201, resp.get_json())
        return resp.get_json()

    def count(self, model, **filters):
        with self.app.app_context():
            return model.query.filter_by(**filters).count()


class FileDatabaseTestCase(AppTestCase):
    """Same as AppTestCase, backed by a SQLite file so several threads can share it."""

    engine_options = {'connect_args': {'timeout': 30}}

    def database_uri(self):
        self.tmpdir = tempfile.mkdtemp()
        return 'sqlite:///' + os.path.join(self.tmpdir, 'redemptions.db')

    def tearDown(self):
        super().tearDown()
        shutil.rmtree(self.tmpdir, ignore_errors=True)
