"""Tests for mqttopts.tls module."""

import pytest
from mqttopts.tls import (
    PemKeyCertOptions, PemTrustOptions, JksOptions, PfxOptions,
    key_cert_from_record, trust_from_record, key_cert_record_key, trust_record_key,
)
from mqttopts.errors import InvalidArgument


class TestPemKeyCertOptions:
    """Test PEM key material."""

    def test_defaults(self):
        """No paths by default."""
        pem = PemKeyCertOptions()
        assert pem.cert_paths == []
        assert pem.key_paths == []

    def test_paths_copied(self):
        """The constructor does not alias the given lists."""
        certs = ['a.crt']
        pem = PemKeyCertOptions(certs, ['a.key'])
        certs.append('b.crt')
        assert pem.cert_paths == ['a.crt']

    @pytest.mark.parametrize('method', ['add_cert_path', 'add_key_path'])
    def test_add_path_rejects_none(self, method):
        """Added paths must be strings."""
        pem = PemKeyCertOptions()
        with pytest.raises(InvalidArgument, match='must be a string'):
            getattr(pem, method)(None)
        assert pem.copy() == PemKeyCertOptions()

    def test_trust_add_path_rejects_none(self):
        """Trusted certificate paths must be strings."""
        with pytest.raises(InvalidArgument, match='certPath must be a string'):
            PemTrustOptions().add_cert_path(None)

    def test_length_mismatch(self):
        """Each certificate needs a key."""
        with pytest.raises(InvalidArgument, match='same length'):
            PemKeyCertOptions(['a.crt', 'b.crt'], ['a.key'])

    def test_paths_must_be_strings(self):
        """A bare string is not a list of paths."""
        with pytest.raises(InvalidArgument, match='certPaths must be a list of strings'):
            PemKeyCertOptions('a.crt', ['a.key'])

    def test_record(self):
        """Records use certPaths/keyPaths."""
        pem = PemKeyCertOptions(['a.crt'], ['a.key'])
        assert pem.to_record() == {'certPaths': ['a.crt'], 'keyPaths': ['a.key']}
        assert PemKeyCertOptions.from_record(pem.to_record()) == pem


class TestStores:
    """Test JKS and PFX stores."""

    def test_record_omits_missing(self):
        """Absent path and password are left out of the record."""
        assert JksOptions().to_record() == {}
        assert PfxOptions('a.p12').to_record() == {'path': 'a.p12'}

    def test_kinds_not_equal(self):
        """A JKS and a PFX store with the same path differ."""
        assert JksOptions('a', 'pw') != PfxOptions('a', 'pw')
        assert JksOptions('a', 'pw') == JksOptions('a', 'pw')

    def test_repr_hides_password(self):
        """The password never appears in repr."""
        assert repr(JksOptions('k.jks', 'secret')) == "JksOptions(path='k.jks')"

    def test_copy_keeps_type(self):
        """copy() returns the same store kind."""
        assert isinstance(PfxOptions('a.p12').copy(), PfxOptions)


class TestRecordKeys:
    """Test record key selection."""

    def test_key_cert_keys(self):
        """Each key material kind has its own record key."""
        assert key_cert_record_key(PemKeyCertOptions()) == 'pemKeyCertOptions'
        assert key_cert_record_key(JksOptions()) == 'keyStoreOptions'
        assert key_cert_record_key(PfxOptions()) == 'pfxKeyCertOptions'

    def test_trust_keys(self):
        """Each trust material kind has its own record key."""
        assert trust_record_key(PemTrustOptions()) == 'pemTrustOptions'
        assert trust_record_key(JksOptions()) == 'trustStoreOptions'
        assert trust_record_key(PfxOptions()) == 'pfxTrustOptions'

    def test_unsupported(self):
        """Trust-only material has no key cert record key."""
        with pytest.raises(InvalidArgument, match='unsupported options type'):
            key_cert_record_key(PemTrustOptions())

    def test_from_record(self):
        """The record key selects the class."""
        key, options = trust_from_record({'pfxTrustOptions': {'path': 't.p12'}})
        assert key == 'pfxTrustOptions'
        assert options == PfxOptions('t.p12')

    def test_from_record_absent(self):
        """Records without material give (None, None)."""
        assert key_cert_from_record({'host': 'x'}) == (None, None)

    def test_from_record_not_object(self):
        """Material must be an object."""
        with pytest.raises(InvalidArgument, match='keyStoreOptions must be an object'):
            key_cert_from_record({'keyStoreOptions': 'k.jks'})
