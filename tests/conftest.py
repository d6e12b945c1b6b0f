import copy
import json
import os
import sys

import pytest

# 프로젝트 루트를 sys.path에 추가
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from zkmixer.groth16.codec import encode_u256
from zkmixer.groth16.deserialization import parse_proof, parse_verification_key
from zkmixer.groth16.field import CURVE_ORDER, G1, G2, ec_mul, normalize
from zkmixer.groth16.preparation import prepare_verification_key
from zkmixer.pool.config import TestingConfig
from zkmixer.pool.ledger import Ledger
from zkmixer.pool.storage import LedgerStore


# ── 알려진 BLS12-381 Groth16 벡터 (출금 회로, 공개 입력 [root, nullifierHash]) ──

KNOWN_COMMITMENT = 21230726593955799921294235288119148384132470247301542251439992487769590832624
KNOWN_ROOT = 11707923398010884771104902347581583507748139574064506485019337720597328298281
KNOWN_NULLIFIER = 25552435442991663747900835940687199996982543695763714737597223653118621902822

KNOWN_VK = {
    "protocol": "groth16",
    "curve": "bls12381",
    "nPublic": 2,
    "vk_alpha_1": [
        "2448874857023974973026039179601311941245479845877357215799007016607896985573141278772848013541221206695622401150255",
        "1356372945095092488355761279959555937533398384628269592987610253636932229929493086101626441995479664167971984880995",
        "1",
    ],
    "vk_beta_2": [
        [
            "2883557283179017990684231795368683826531564748523328167192891173597163310626361843827650299706150752112128247781718",
            "2817824425687704468001957429962220025241283972312504240277526642453565933302630881962254706181115007482924051409656",
        ],
        [
            "1944853843526887003804921136604157095102019030361151660248118265420014854066295417794605162911160495829422730839234",
            "3863387530621888759020457725754991180837923423490110062569036152805411815619492931752796804028413687263808178841259",
        ],
        ["1", "0"],
    ],
    "vk_gamma_2": [
        [
            "352701069587466618187139116011060144890029952792775240219908644239793785735715026873347600343865175952761926303160",
            "3059144344244213709971259814753781636986470325476647558659373206291635324768958432433509563104347017837885763365758",
        ],
        [
            "1985150602287291935568054521177171638300868978215655730859378665066344726373823718423869104263333984641494340347905",
            "927553665492332455747201965776037880757740193453592970025027978793976877002675564980949289727957565575433344219582",
        ],
        ["1", "0"],
    ],
    "vk_delta_2": [
        [
            "54914076621958694751565355897841036335765064662226446795997338252566358370434592752110703814310071896267850983640",
            "1999244175769498267777836540053722732768863305916601299372023231188477238261626833666950286528737143011262370343540",
        ],
        [
            "1909672756823837448174089300349973261563914576075977272280724719112387445660411586242074181066802602997851100183323",
            "696541802754615100390907730659808157479256236674397300950801911856627800479869251507555183409654546713990344031816",
        ],
        ["1", "0"],
    ],
    "IC": [
        [
            "3238616715122989247135112038747018645755882381443984262429221074158301207925618704135276853096498558292425291298242",
            "3992154954145077585643960524400012910595371098612940577232633132480876457042234861152139921436311154130720893607825",
            "1",
        ],
        [
            "1317981778966324232395763408436972705300309762012561797246179374393524029788979897324138254778596876285402066363409",
            "1012027418433913400221466281217360011303276349417091621012324221371259134763931112976087141357038786144091665401078",
            "1",
        ],
        [
            "719904090459766113556465036896653198312710565196233141421845008457589324016290858586672065118873586748107301659121",
            "1017436267077909227073507398373091806172200485980954785569410477214171517010439488135906388407984649924316175712374",
            "1",
        ],
    ],
}

KNOWN_PROOF = {
    "pi_a": [
        "1177564558550769956785339462842115460663322334705567835885914518147582035494482474444088433269065054572726278485401",
        "3463774854543115711511322796130875262715327601213314678256509445986239775532424704720161136511271046778428668115295",
        "1",
    ],
    "pi_b": [
        [
            "3939735334779363728874826927428882850014215914525443141528712663073265693419464582354918395773933609568093166281375",
            "2762082853524568870366722466346836656196165120714407758945309012775931831893159584521431747408484009464992517674096",
        ],
        [
            "1238881836365727332955464755544056303340279533650879933373712064446408017638369002208624038950250892465747100623589",
            "2133327084326797619312560177340933012701302717709822268851609732238727555832689865031979464510335339231088766600526",
        ],
        ["1", "0"],
    ],
    "pi_c": [
        "352516744368930426190313000951685856589231636023979896326701901794604226910259816430279862303227124005715360165947",
        "1207590512348526635165457329307974841887001330405831957414491116032670409554156238728603276568528858063625545112694",
        "1",
    ],
    "protocol": "groth16",
    "curve": "bls12381",
}


# ── 합성(synthetic) Groth16 인스턴스 ──
# trapdoor 스칼라를 알고 있으므로 임의의 공개 입력에 대해 유효한 증명을 직접 만든다:
#   a·b = α·β + s·γ + c·δ  (s = k0 + Σ xᵢ·kᵢ₊₁)

TOXIC_ALPHA = 3926
TOXIC_BETA = 3604
TOXIC_GAMMA = 2971
TOXIC_DELTA = 1357
PROVER_A = 4106
PROVER_B = 4565


def g1_json(point):
    x, y = normalize(point)
    return [str(int(x)), str(int(y)), "1"]


def g2_json(point):
    x, y = normalize(point)
    return [
        [str(int(x.coeffs[0])), str(int(x.coeffs[1]))],
        [str(int(y.coeffs[0])), str(int(y.coeffs[1]))],
        ["1", "0"],
    ]


def synthetic_groth16(inputs):
    """공개 입력 inputs에 대해 (검증키 dict, 증명 dict)를 만든다."""
    ks = [101 + 7 * i for i in range(len(inputs) + 1)]
    s = (ks[0] + sum(x * k for x, k in zip(inputs, ks[1:]))) % CURVE_ORDER
    c = (
        (PROVER_A * PROVER_B - TOXIC_ALPHA * TOXIC_BETA - s * TOXIC_GAMMA)
        * pow(TOXIC_DELTA, -1, CURVE_ORDER)
    ) % CURVE_ORDER

    vk = {
        "protocol": "groth16",
        "curve": "bls12381",
        "nPublic": len(inputs),
        "vk_alpha_1": g1_json(ec_mul(G1, TOXIC_ALPHA)),
        "vk_beta_2": g2_json(ec_mul(G2, TOXIC_BETA)),
        "vk_gamma_2": g2_json(ec_mul(G2, TOXIC_GAMMA)),
        "vk_delta_2": g2_json(ec_mul(G2, TOXIC_DELTA)),
        "IC": [g1_json(ec_mul(G1, k)) for k in ks],
    }
    proof = {
        "pi_a": g1_json(ec_mul(G1, PROVER_A)),
        "pi_b": g2_json(ec_mul(G2, PROVER_B)),
        "pi_c": g1_json(ec_mul(G1, c)),
        "protocol": "groth16",
        "curve": "bls12381",
    }
    return vk, proof


SYNTHETIC_INPUTS = [5, 7]
SYNTHETIC_ROOT = 4242
SYNTHETIC_NULLIFIER = 777


def to_bytes(obj):
    return json.dumps(obj).encode("utf-8")


class StubAccumulator:
    """항상 정해진 root를 돌려주는 Merkle 누산기."""

    def __init__(self, root):
        self._root = root

    def insert(self, leaf):
        return self._root, []

    def is_known_root(self, root):
        return root == self._root


# ── fixtures ──

@pytest.fixture
def known_vk():
    return copy.deepcopy(KNOWN_VK)


@pytest.fixture
def known_proof():
    return copy.deepcopy(KNOWN_PROOF)


@pytest.fixture(scope="session")
def synthetic():
    vk, proof = synthetic_groth16(SYNTHETIC_INPUTS)
    return {"vk": vk, "proof": proof, "inputs": SYNTHETIC_INPUTS}


@pytest.fixture(scope="session")
def synthetic_parsed(synthetic):
    vk = parse_verification_key(to_bytes(synthetic["vk"]))
    proof = parse_proof(to_bytes(synthetic["proof"]))
    return {"vk": vk, "pvk": prepare_verification_key(vk), "proof": proof}


@pytest.fixture(scope="session")
def known_parsed():
    vk = parse_verification_key(to_bytes(KNOWN_VK))
    proof = parse_proof(to_bytes(KNOWN_PROOF))
    return {"vk": vk, "pvk": prepare_verification_key(vk), "proof": proof}


def make_ledger(root=SYNTHETIC_ROOT, config=TestingConfig):
    ledger = Ledger(
        LedgerStore.memory(),
        config=config,
        accumulator_factory=lambda leaves: StubAccumulator(root),
    )
    for account, amount in config.GENESIS_BALANCES.items():
        ledger.currency.mint(account, amount)
    return ledger


@pytest.fixture
def ledger():
    return make_ledger()


@pytest.fixture
def ready_ledger(ledger, synthetic):
    """합성 검증키가 설정되고 커밋먼트 하나가 입금된 원장."""
    ledger.setup_verification(1, to_bytes([str(x) for x in synthetic["inputs"]]), to_bytes(synthetic["vk"]))
    ledger.deposit(1, encode_u256(12345))
    return ledger
