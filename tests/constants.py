from domain.accounts import Address, StateRoot

ONE_ETHER = 10**18

ADDRESS_A = Address("0x00000000000000000000000000000000000000aa")
ADDRESS_B = Address("0x00000000000000000000000000000000000000bb")
ADDRESS_C = Address("0x00000000000000000000000000000000000000cc")
ADDRESS_D = Address("0x00000000000000000000000000000000000000dd")

ROOT_1 = StateRoot("0x" + "11" * 32)
ROOT_2 = StateRoot("0x" + "22" * 32)
