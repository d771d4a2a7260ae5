from cryptography import x509
import pytest


# Key generated with TestDPC: RSA key, attestation version 3, keymaster 4.
ATTESTATION_CERT_PEM = b"""-----BEGIN CERTIFICATE-----
MIIGCDCCBHCgAwIBAgIBATANBgkqhkiG9w0BAQsFADApMRkwFwYDVQQFExAyZGM1
OGIyZDFhMjQxMzI2MQwwCgYDVQQMDANURUUwIBcNNzAwMTAxMDAwMDAwWhgPMjEw
NjAyMDcwNjI4MTVaMB8xHTAbBgNVBAMMFEFuZHJvaWQgS2V5c3RvcmUgS2V5MIIB
IjANBgkqhkiG9w0BAQEFAAOCAQ8AMIIBCgKCAQEApNVcnyN40MANMbbo2nMGNq2N
NysDSjfLm0W3i6wPKf0ffCYkhWM4dCmQKKf50uAZTBeTit4cNwXeZn3qellMlOsI
N3Qc384rfN/8cikrRvUAgibz0Jy7STykjwa7x6tKwqITxbO8HqAhKo8/BQXUxzrO
dIg5ciy+UM7Vgh7a7ogen0KL2iGgrsalb1ti7Vlzb6vIJ4WzIC3TGD2sCkoPahgh
wqFDZZCo/FzaLoNY0jAUX2mL+kf8aUaoxz7xA9FTvgara+1pLBR1s4c8xPS2HdZi
pcVXWfey0wujv1VAKs4+tXjKlHkYBHBBceEjxUtEmrapSQEdpHPv7Xh9Uanq4QID
AQABo4ICwTCCAr0wDgYDVR0PAQH/BAQDAgeAMIICqQYKKwYBBAHWeQIBEQSCApkw
ggKVAgEDCgEBAgEECgEBBANhYmMEADCCAc2/hT0IAgYBZOYGEYe/hUWCAbsEggG3
MIIBszGCAYswDAQHYW5kcm9pZAIBHTAZBBRjb20uYW5kcm9pZC5rZXljaGFpbgIB
HTAZBBRjb20uYW5kcm9pZC5zZXR0aW5ncwIBHTAZBBRjb20ucXRpLmRpYWdzZXJ2
aWNlcwIBHTAaBBVjb20uYW5kcm9pZC5keW5zeXN0ZW0CAR0wHQQYY29tLmFuZHJv
aWQuaW5wdXRkZXZpY2VzAgEdMB8EGmNvbS5hbmRyb2lkLmxvY2FsdHJhbnNwb3J0
AgEdMB8EGmNvbS5hbmRyb2lkLmxvY2F0aW9uLmZ1c2VkAgEdMB8EGmNvbS5hbmRy
b2lkLnNlcnZlci50ZWxlY29tAgEdMCAEG2NvbS5hbmRyb2lkLndhbGxwYXBlcmJh
Y2t1cAIBHTAhBBxjb20uZ29vZ2xlLlNTUmVzdGFydERldGVjdG9yAgEdMCIEHWNv
bS5nb29nbGUuYW5kcm9pZC5oaWRkZW5tZW51AgEBMCMEHmNvbS5hbmRyb2lkLnBy
b3ZpZGVycy5zZXR0aW5ncwIBHTEiBCAwGqPLCBE0UBxF8UIqvGbCQiT9Xe1f3I8X
5pcXb9hmqjCBrqEIMQYCAQICAQOiAwIBAaMEAgIIAKUFMQMCAQSmCDEGAgEDAgEF
v4FIBQIDAQABv4N3AgUAv4U+AwIBAL+FQEwwSgQgAAAAAAAAAAAAAAAAAAAAAAAA
AAAAAAAAAAAAAAAAAAABAQAKAQIEIHKNsSdPHxzxVx3kOAsEilVKxKOA529TVQg1
KQhKk3gBv4VBAwIBAL+FQgUCAwMUs7+FTgUCAwMUs7+FTwUCAwMUszANBgkqhkiG
9w0BAQsFAAOCAYEAJMIuzdNUdfrE6sIdmsnMn/scSG2odbphj8FkX9JGdF2SOT59
9HuDY9qhvkru2Dza4sLKK3f4ViBhuR9lpfeprKvstxbtBO7jkLYfVn0ZRzHRHVEy
iW5IVKh+qOXVJ9S1lMShOTlsaYJytLKIlcrRAZBEXZiNbzTuVh1CH6X9Ni1dog14
snm+lcOeORdL9fht2CHau/caRnpWiZbjoAoJp0O89uBrRkXPpln51+3jPY6AFny3
0grNAvKguauDcPPhNV1yR+ylSsQi2gm3Rs4pgtlxFLMfZLgT0cbkl+9zk/QUqlpB
P8ftUBsOI0ARr8xhFN3cvq9kXGLtJ9hEP9PRaflAFREkDK3IBIbVcAFZBFoAQOdE
9zy0+F5bQrznPGaZg4Dzhcx33qMDUTgHtWoy+k3ePGQMEtmoTTLgQywWOIkXEoFq
qGi9GKJXUT1KYi5NsigaYqu7FoN4Qsvs61pMUEfZSPP2AFwkA8uNFbmb9uxcxaGH
CA8i3i9VM6yOLIrP
-----END CERTIFICATE-----
"""

# Leaf appended below the attested key, carrying a record of its own.
LEAF_CERT_PEM = b"""-----BEGIN CERTIFICATE-----
MIIEFDCCAnygAwIBAgIVAKZFQPAXr5VWrosuqx4C8tai2XbHMA0GCSqGSIb3DQEB
CwUAMBgxFjAUBgNVBAMMDVVua25vd25Jc3N1ZXIwHhcNMjMwMjE1MTU0MzIwWhcN
MjMwMjE1MTU0ODIwWjAdMRswGQYDVQQDDBJBbmRyb2lkQXR0ZXN0ZWRLZXkwggGi
MA0GCSqGSIb3DQEBAQUAA4IBjwAwggGKAoIBgQDJAVfP/7F1bUbDqxMnOVXpSjt5
NJwYemBJkN7l7TTbAhTfMW91006Si/snd79Y6bsJklVoiEN9LGL7tQrJEf5lSSLX
ZeppjsbLqKnogFHhDJy2vaSiypV2wZdX+kO0qqIKjRvgSqHuTz3gemI1rWilrG3C
vd3iHGlkw/4X5PpHQKz99/20p85HP6f/jydMHewFDRQCbkbo2pJ5WrJsyPe9me3o
QE0O3lgij7jJ/UBHyb9iH0w13yi+1yZ/jgyojL4QNUeWZnxW656zfHCB8weePD+l
tX4AAztZTziJQwk3zVClw4xIPTeztQV6ddRQgjSjGvWanpXqhJx8mq11gWaVJoCl
q/I0KOguVsKq42M25uhF7/iAQjC+6lOUUfi2+aPwyTUfGHc5Bw/rTSw2LzvZDnUW
8/yw4OUTyDravVcQLeoBES4+O5cVL0yTKDY0THG+ymgsFNgFS7PXUnAbXczYzvg8
ldXKOXxnF5nWgg55n2iSQ6mqtHDEUsjcxjmuFcMCAwEAAaNQME4wTAYKKwYBBAHW
eQIBEQQ+MDwCAQEKAQECAQIKAQEEEkEgcmFuZG9tIGNoYWxsZW5nZQQAMAAwFr+F
SQgEBlNFUklBTL+FSgYEBElNRUkwDQYJKoZIhvcNAQELBQADggGBAHSms4IBjkc8
1ZLHu5l70Ih2RrNU4XAc2E/oJX8OsBte9ZRwDT3TdcfLeg0rSneS+aB4xN1BGfmL
DPZ1epRzMY4RagVhzBEauHpTaM2imRT9RN5TxbFvuMC4ELICYr5qHfqeALIlMET3
TbCAo3njpNh5ids6qdlmpZRoYBQNMKfWJn8SUtCmVMk87FA7RZZCqCiRk+PBnciT
O3LLbwT4aBlMinQ84gBfVXRqOvGAeGOgojDqGyK3tDMjIS7itpGb23vGogxHiHjA
i8hiQhsHA+C89duCdeGyWZGmxwln7QRsosFI7G4ZOufXPLZt/DauNAC2Mb2OPcDw
4tSKQvzQiL9UG4X3Cck0JnATxjT5sLttshJl98V6jQHcWSnjg8+oa3B8WgcePX8E
QgcLhYaEGo9WDYJQvHfuUE5AquTxdTRbeiDbV7W+FAOQ5zi/wiGit86gF26120OQ
KzQHP94/ORuAT/lkv3Fp3HytF4n3scur1nI0WqrfKpbUuPkmndCIbg==
-----END CERTIFICATE-----
"""

LEAF_EXTENSION_HEX = (
    "303c0201010a01010201020a01010412412072616e646f6d206368616c6c656e6765"
    "040030003016bf854908040653455249414cbf854a060404494d4549"
)


@pytest.fixture
def attestation_certificate():
    return x509.load_pem_x509_certificate(ATTESTATION_CERT_PEM)


@pytest.fixture
def leaf_certificate():
    return x509.load_pem_x509_certificate(LEAF_CERT_PEM)


@pytest.fixture
def sample_chain(leaf_certificate, attestation_certificate):
    """Certificate chain ordered leaf first."""

    return [leaf_certificate, attestation_certificate]


@pytest.fixture
def leaf_extension():
    return bytes.fromhex(LEAF_EXTENSION_HEX)


@pytest.fixture(autouse=True)
def _no_strict_env(monkeypatch):
    monkeypatch.delenv("KEYATTESTATION_STRICT", raising=False)


@pytest.fixture
def attestation_extension(attestation_certificate):
    oid = x509.ObjectIdentifier("1.3.6.1.4.1.11129.2.1.17")
    return attestation_certificate.extensions.get_extension_for_oid(oid).value.value
